# siteapi/core/request_utils.py

import ipaddress
from typing import Mapping

# Ordem de prioridade: CDN, proxies genéricos, conexão direta
PROXY_IP_HEADERS = (
    "HTTP_CF_CONNECTING_IP",
    "HTTP_X_FORWARDED_FOR",
    "HTTP_X_REAL_IP",
    "HTTP_CLIENT_IP",
)

UNKNOWN_IP = "0.0.0.0"


def is_public_ip(value: str) -> bool:
    try:
        ip = ipaddress.ip_address(value)
    except ValueError:
        return False

    return not (
        ip.is_private
        or ip.is_reserved
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_unspecified
        or ip.is_multicast
    )


def resolve_client_ip(environ: Mapping[str, str], *, trust_proxy_headers: bool = True) -> str:
    """
    Resolve o IP do cliente a partir do WSGI environ.

    Só aceita valores de headers de proxy que sejam IPs públicos, o que
    impede spoofing trivial com faixas privadas. Sem header válido, usa
    REMOTE_ADDR.
    """
    names = PROXY_IP_HEADERS + ("REMOTE_ADDR",) if trust_proxy_headers else ("REMOTE_ADDR",)

    for name in names:
        raw = environ.get(name)
        if not raw:
            continue
        candidate = raw.split(",")[0].strip()
        if is_public_ip(candidate):
            return candidate

    return environ.get("REMOTE_ADDR") or UNKNOWN_IP


def extract_bearer_token(headers: Mapping[str, str], query: Mapping[str, str] | None = None) -> str | None:
    auth = headers.get("Authorization") or ""
    parts = auth.split(None, 1)
    if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1].strip():
        return parts[1].strip()

    # fallback para contextos que não conseguem enviar header
    if query is not None:
        token = query.get("token")
        if token:
            return token

    return None
