# Domain services: every operation takes an explicit Session and owner id.
