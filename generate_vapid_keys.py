#!/usr/bin/env python3
"""
Generate the VAPID key pair duel push notifications are signed with.

Prints the lines to paste into backend/.env; the public key also goes to
the mobile web client so it can create push subscriptions.
"""

try:
    from cryptography.hazmat.primitives import serialization
    from py_vapid import Vapid01 as Vapid
    from py_vapid.utils import b64urlencode
except ImportError:
    print("ERROR: py_vapid not installed (it ships with pywebpush)")
    print("  pip install -e .")
    raise SystemExit(1)


def main():
    vapid = Vapid()
    vapid.generate_keys()

    public_key = b64urlencode(vapid.public_key.public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.UncompressedPoint
    ))
    private_key = b64urlencode(
        vapid.private_key.private_numbers().private_value.to_bytes(32, "big")
    )

    print("--- backend/.env ---")
    print(f"VAPID_PUBLIC_KEY={public_key}")
    print(f"VAPID_PRIVATE_KEY={private_key}")
    print("VAPID_SUBJECT=mailto:admin@quizduel.app")
    print()
    print("Keep the private key secret; only the public key belongs in the client.")


if __name__ == "__main__":
    main()
