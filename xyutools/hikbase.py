"""Fetch a snapshot from a network video recorder behind HTTP digest auth."""

from __future__ import annotations

import base64
import hashlib
import os
import secrets
import sys
from datetime import datetime

import requests

CONNECT_TIMEOUT = 10.0
READ_WRITE_TIMEOUT = 20.0
USER_AGENT = "AtScale"
NONCE_COUNT = "00000001"
DIGEST_URI = "/auth"


def digest_auth_params(header: str | None) -> dict[str, str] | None:
    """Parameters of a ``Digest`` authentication header, or None if it is not one."""
    if not header:
        return None
    scheme, sep, rest = header.partition(" ")
    if not sep or scheme != "Digest":
        return None
    result: dict[str, str] = {}
    for item in rest.split(","):
        key, eq, value = item.partition("=")
        if not eq:
            continue
        result[key.strip('" ')] = value.strip('" ')
    return result


def random_key() -> str:
    """Eight random bytes, base64 encoded."""
    return base64.b64encode(secrets.token_bytes(8)).decode("ascii")


def md5_hex(data: str) -> str:
    """Lower-case hexadecimal MD5 digest of ``data``."""
    return hashlib.md5(data.encode("utf-8")).hexdigest()


def new_timeout_session() -> requests.Session:
    """An HTTP session configured from the ``atscale_*`` environment variables.

    Certificate checks are off; a client certificate is used when both
    ``atscale_http_sslcert`` and ``atscale_http_sslkey`` are set, and
    ``atscale_disable_keepalives=true`` closes connections after each request.
    """
    cert_location = os.environ.get("atscale_http_sslcert", "")
    key_location = os.environ.get("atscale_http_sslkey", "")
    disable_keep_alives = os.environ.get("atscale_disable_keepalives", "") == "true"

    session = requests.Session()
    session.verify = False
    if cert_location and key_location:
        if os.path.isfile(cert_location) and os.path.isfile(key_location):
            session.cert = (cert_location, key_location)
        else:
            print(
                f"Error loading X509 Key Pair: {cert_location}, {key_location}",
                file=sys.stderr,
            )
    session.headers.update(
        {
            "User-Agent": USER_AGENT,
            "Accept": "*/*",
            "Accept-Encoding": "identity",
            "Connection": "close" if disable_keep_alives else "Keep-Alive",
        }
    )
    return session


def capture_picture(
    username: str,
    password: str,
    ip: str,
    port: str,
    channel: str,
    save_path: str = "",
) -> str:
    """Download a picture from a channel and save it under ``save_path``.

    Returns the name of the saved file. Raises requests.HTTPError when the
    device does not ask for digest authentication or refuses the picture.
    """
    if not save_path:
        save_path = "./output.jpg"
    filename = datetime.now().strftime("%Y%m%d%H%M%S") + ".jpg"
    target = f"{save_path}/{filename}"
    url = f"http://{ip}:{port}/ISAPI/Streaming/channels/{channel}01/picture"
    timeout = (CONNECT_TIMEOUT, READ_WRITE_TIMEOUT)

    with new_timeout_session() as session:
        challenge = session.get(url, timeout=timeout)
        _ = challenge.content
        if challenge.status_code != 401:
            raise requests.HTTPError(
                f"response status code should have been 401, it was {challenge.status_code}",
                response=challenge,
            )
        params = digest_auth_params(challenge.headers.get("WWW-Authenticate")) or {}
        realm = params.get("realm", "")
        qop = params.get("qop", "")
        nonce = params.get("nonce", "")
        opaque = params.get("opaque", "")
        algorithm = params.get("algorithm", "")

        ha1 = md5_hex(f"{username}:{realm}:{password}")
        ha2 = md5_hex(f"GET:{DIGEST_URI}")
        cnonce = random_key()
        response_digest = md5_hex(":".join([ha1, nonce, NONCE_COUNT, cnonce, qop, ha2]))
        authorization = (
            f'Digest username="{username}", realm="{realm}", nonce="{nonce}", '
            f'uri="{DIGEST_URI}", response="{response_digest}", qop={qop}, '
            f'nc={NONCE_COUNT}, cnonce="{cnonce}", opaque="{opaque}", '
            f'algorithm="{algorithm}"'
        )

        picture = session.get(url, headers={"Authorization": authorization}, timeout=timeout)
        if picture.status_code != 200:
            raise requests.HTTPError(
                f"picture request failed with status {picture.status_code}",
                response=picture,
            )
        with open(target, "wb") as fh:
            fh.write(picture.content)
    return filename