def test_login_rate_limit(client):
    # Register a user first
    r = client.post("/user/register", json={"name": "Rl", "userName": "rl-user", "password": "secret"})
    assert r.status_code == 200

    # Hit login with wrong password 5 times (allowed)
    for _ in range(5):
        r_bad = client.post("/user/login", json={"userName": "rl-user", "password": "wrong"})
        assert r_bad.status_code == 401

    # 6th attempt within the same minute should be rate limited
    r_limit = client.post("/user/login", json={"userName": "rl-user", "password": "wrong"})
    assert r_limit.status_code == 429


def test_register_rate_limit(client):
    # First three registrations should pass
    for i in range(3):
        r = client.post(
            "/user/register",
            json={"name": "Rate", "userName": f"rate{i}", "password": "x"},
        )
        assert r.status_code == 200

    # Fourth within the same minute should hit the limiter
    r4 = client.post(
        "/user/register",
        json={"name": "Rate", "userName": "rate3", "password": "x"},
    )
    assert r4.status_code == 429
