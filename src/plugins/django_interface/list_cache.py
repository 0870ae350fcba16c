"""
Cache das listagens com versão por recurso.

A chave inclui a versão corrente do recurso, o escopo do usuário e os
parâmetros da query; qualquer mutação incrementa a versão e todas as
páginas antigas deixam de ser lidas (expiram pelo TTL).
"""
import hashlib

from django.core.cache import cache

LIST_TTL = 60  # s


def _version_key(resource: str) -> str:
    return f"list:{resource}:version"


def current_version(resource: str) -> int:
    return cache.get(_version_key(resource)) or 0


def list_cache_key(resource: str, scope: str, params: dict) -> str:
    raw = "&".join(f"{k}={params[k]}" for k in sorted(params))
    digest = hashlib.md5(raw.encode(), usedforsecurity=False).hexdigest()
    return f"list:{resource}:v{current_version(resource)}:{scope}:{digest}"


def invalidate(*resources: str) -> None:
    for resource in resources:
        key = _version_key(resource)
        if not cache.add(key, 1, None):
            try:
                cache.incr(key)
            except ValueError:
                # chave expirou entre o add e o incr
                cache.set(key, 1, None)
