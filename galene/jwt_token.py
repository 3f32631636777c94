"""JSON Web Token parsing and verification."""

from __future__ import annotations

import base64
import binascii
import posixpath
from dataclasses import dataclass, field
from urllib.parse import urlsplit

import jwt
from cryptography.hazmat.primitives.asymmetric import ec

_HMAC_LENGTHS = {"HS256": 32, "HS384": 48, "HS512": 64}


def _parse_base64(name, d):
    v = d.get(name)
    if not isinstance(v, str):
        raise ValueError(f"key {name} not found")
    if "=" in v:
        raise ValueError(f"invalid base64 in {name}")
    try:
        return base64.urlsafe_b64decode(v + "=" * (-len(v) % 4))
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"invalid base64 in {name}") from e


def parse_key(key):
    """Turn a JWK into bytes (oct) or an EC public key."""
    kty = key.get("kty")
    if not isinstance(kty, str):
        raise ValueError("kty not found")
    alg = key.get("alg")
    if not isinstance(alg, str):
        raise ValueError("alg not found")
    if kty == "oct":
        length = _HMAC_LENGTHS.get(alg)
        if length is None:
            raise ValueError("unknown alg")
        k = _parse_base64("k", key)
        if len(k) != length:
            raise ValueError("bad length for key")
        return k
    if kty == "EC":
        if alg != "ES256":
            raise ValueError("unknown alg")
        crv = key.get("crv")
        if not isinstance(crv, str):
            raise ValueError("crv not found")
        if crv != "P-256":
            raise ValueError("unknown crv")
        x = int.from_bytes(_parse_base64("x", key), "big")
        y = int.from_bytes(_parse_base64("y", key), "big")
        try:
            return ec.EllipticCurvePublicNumbers(x, y, ec.SECP256R1()).public_key()
        except ValueError as e:
            raise ValueError("key is not on curve") from e
    raise ValueError("unknown key type")


def parse_keys(keys, alg, kid):
    """Parse the keys matching alg and kid; empty selectors match all."""
    result = []
    for k in keys or []:
        if alg and k.get("alg") != alg:
            continue
        if kid and k.get("kid") != kid:
            continue
        result.append(parse_key(k))
    return result


@dataclass
class JWT:
    """A verified JSON Web Token."""

    header: dict = field(default_factory=dict)
    claims: dict = field(default_factory=dict)

    def check(self, host, group, username):
        """Return (subject, permissions) if the token is for this group."""
        sub = self.claims.get("sub", "")
        if sub is None:
            sub = ""
        if not isinstance(sub, str):
            raise ValueError("invalid 'sub' field")

        aud = self.claims.get("aud")
        if aud is None:
            auds = []
        elif isinstance(aud, str):
            auds = [aud]
        elif isinstance(aud, list) and all(isinstance(a, str) for a in aud):
            auds = aud
        else:
            raise ValueError("invalid 'aud' field")

        expected = posixpath.normpath("/group/" + group) + "/"
        ok = False
        for u in auds:
            try:
                parts = urlsplit(u)
            except ValueError:
                continue
            if host:
                netloc = parts.netloc.rpartition("@")[2]
                if netloc.casefold() != host.casefold():
                    continue
            if parts.path == expected:
                ok = True
                break
        if not ok:
            raise ValueError("token for wrong group")

        perms = self.claims.get("permissions")
        if perms is None:
            return sub, []
        if not isinstance(perms, list) or not all(
            isinstance(p, str) for p in perms
        ):
            raise ValueError("invalid 'permissions' field")
        return sub, list(perms)


def parse_jwt(token, keys):
    """Verify token as a JWT; return None if it does not look like one."""
    try:
        header = jwt.get_unverified_header(token)
    except jwt.DecodeError:
        return None
    alg = header.get("alg")
    if not isinstance(alg, str) or not alg:
        raise ValueError("alg not found")
    kid = header.get("kid")
    if not isinstance(kid, str):
        kid = ""
    candidates = parse_keys(keys, alg, kid)
    if not candidates:
        raise ValueError("no matching key")
    last = None
    for k in candidates:
        try:
            claims = jwt.decode(
                token,
                k,
                algorithms=[alg],
                options={"require": ["exp"], "verify_aud": False},
                leeway=5,
            )
        except jwt.InvalidSignatureError as e:
            last = e
            continue
        except jwt.DecodeError:
            return None
        return JWT(header=header, claims=claims)
    raise last