"""
Asset URL derivation.

encore.moe hands out three shapes of asset reference:

  - absolute URLs (``https://.../T_IconRoleHead_1102.png``) — used as-is;
  - paths relative to its resource root (``/UI/Img/x.png``) — prefixed with
    ``[upstream] resource_base``;
  - Unreal engine object paths (``/Game/Aki/UI/.../T_Icon.T_Icon``) —
    rehosted on the secondary provider.

The rehost helpers depend on the secondary provider mirroring the engine's
``UI/...`` directory layout.  When the marker or prefix is missing the helper
raises ``ResolveError`` and the entity is skipped.

Example::

    rehost_by_marker(
        "https://api.encore.moe/resource/Data/UI/Img/x.png",
        marker="/UI/", host="https://api.hakush.in/ww", extension=".webp",
    )
    # → "https://api.hakush.in/ww/UI/Img/x.webp"

    rehost_by_prefix(
        "/Game/Aki/UI/UIResources/Common/Image/IconWeapon/T_IconWeapon21010011_UI.T_IconWeapon21010011_UI",
        prefix="/Game/Aki/", template="https://api.hakush.in/ww/{path}.webp",
    )
    # → "https://api.hakush.in/ww/UI/UIResources/Common/Image/IconWeapon/T_IconWeapon21010011_UI.webp"
"""

from __future__ import annotations

from pathlib import PurePosixPath
from urllib.parse import SplitResult, urlsplit

from wuwa_catalog.errors import ResolveError

_ABSOLUTE_SCHEMES = frozenset({"http", "https"})


def split_url(ref: str) -> SplitResult:
    """``urlsplit`` that raises ``ResolveError`` for malformed references."""
    try:
        return urlsplit(ref)
    except ValueError as exc:
        raise ResolveError(f"Malformed asset reference {ref!r}: {exc}") from exc


def is_absolute(ref: str) -> bool:
    return split_url(ref).scheme.lower() in _ABSOLUTE_SCHEMES


def absolutize(ref: str, base: str) -> str:
    """Return ``ref`` unchanged if absolute, else ``base`` + ``ref``.

    Protocol-relative references (``//cdn/...``) get ``https:``.

    Raises:
        ResolveError: If ``ref`` is empty or not a string.
    """
    if not isinstance(ref, str) or not ref.strip():
        raise ResolveError(f"Empty asset reference: {ref!r}")
    ref = ref.strip()
    if is_absolute(ref):
        return ref
    if ref.startswith("//"):
        return f"https:{ref}"
    return f"{base.rstrip('/')}/{ref.lstrip('/')}"


def replace_extension(path: str, extension: str) -> str:
    """Swap the final suffix of ``path`` for ``extension`` (appending if there is none)."""
    pure = PurePosixPath(path)
    if not pure.name:
        raise ResolveError(f"Asset path has no file name: {path!r}")
    return str(pure.with_suffix(extension))


def rehost_by_marker(url: str, marker: str, host: str, extension: str) -> str:
    """Move the part of ``url``'s path from ``marker`` onward to ``host``.

    Args:
        url: Absolute source URL.
        marker: Path segment that starts the portion to keep (e.g. ``"/UI/"``).
        host: Secondary provider base URL.
        extension: Target file extension including the dot.

    Raises:
        ResolveError: If ``marker`` does not occur in the URL path.
    """
    path = split_url(url).path
    idx = path.find(marker)
    if idx < 0:
        raise ResolveError(f"Marker {marker!r} not found in {url!r}")
    tail = replace_extension(path[idx:], extension)
    return f"{host.rstrip('/')}/{tail.lstrip('/')}"


def rehost_by_prefix(ref: str, prefix: str, template: str) -> str:
    """Strip ``prefix`` from an engine path and format it into ``template``.

    Only the part before the first ``.`` is kept; engine object paths repeat
    the asset name after it (``T_Icon.T_Icon``).

    Raises:
        ResolveError: If the path does not start with ``prefix`` or nothing
            is left after stripping it.
    """
    if not isinstance(ref, str) or not ref:
        raise ResolveError(f"Empty asset reference: {ref!r}")
    path = split_url(ref).path if is_absolute(ref) else ref
    if not path.startswith(prefix):
        raise ResolveError(f"Prefix {prefix!r} not found in {ref!r}")
    stem = path[len(prefix):].split(".", 1)[0].strip("/")
    if not stem:
        raise ResolveError(f"Nothing left of {ref!r} after stripping {prefix!r}")
    return template.format(path=stem)
