"""Bearer-token sessions: token signing, password hashing, identity resolution."""
