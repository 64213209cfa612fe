from argon2 import PasswordHasher

from trendhaven.auth.passwords import hash_pw, needs_rehash, verify_pw


def test_hash_and_verify():
    h = hash_pw("hunter22")
    assert verify_pw(h, "hunter22")
    assert not verify_pw(h, "hunter23")
    assert not verify_pw("not-an-argon-hash", "hunter22")


def test_weak_hashes_are_flagged_for_rehash():
    weak = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1).hash("hunter22")
    assert verify_pw(weak, "hunter22")
    assert needs_rehash(weak)
    assert not needs_rehash(hash_pw("hunter22"))
