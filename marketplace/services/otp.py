"""
Delivery codes.

A code is a 6-digit number drawn uniformly from [100000, 999999] with the
`secrets` CSPRNG. Only its SHA-256 hex digest is ever stored.
"""

import hashlib
import hmac
import secrets

OTP_MIN = 100000
OTP_MAX = 999999


def generate_otp():
    return str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))


def hash_otp(otp):
    return hashlib.sha256(str(otp).encode("utf-8")).hexdigest()


def compare_otp(presented, digest):
    """Constant-time check of a presented code against a stored digest."""
    if presented is None or not digest:
        return False
    return hmac.compare_digest(hash_otp(presented), digest)


def issue_otp():
    """Return a fresh (raw_code, digest) pair."""
    otp = generate_otp()
    return otp, hash_otp(otp)
