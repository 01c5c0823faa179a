"""Archive filename convention.

``npm pack`` names its output ``<name>-<version>.tgz`` where a scoped name
``@scope/pkg`` is flattened to ``scope-pkg``. The flattening is lossy, so
both directions here are heuristics:

- Encoding yields several candidate filenames; callers check all of them.
- Decoding guesses the scope boundary at the first hyphen. A package such
  as ``left-pad`` therefore decodes to ``@left/pad``; the flat name is kept
  alongside so lookups can try it as well. Names with a hyphen before the
  real scope boundary (``@my-org/pkg`` -> ``my-org-pkg``) decode wrongly.
"""

import re
from dataclasses import dataclass

from npmirror.models.package import PackageIdentity

ARCHIVE_EXTENSION = ".tgz"

# Numeric dotted triple, optionally followed by a prerelease tag
_VERSION_SUFFIX = re.compile(r"-(\d+\.\d+\.\d+(?:-[a-zA-Z0-9.]+)?)$")


def candidate_filenames(identity: PackageIdentity, extension: str = ARCHIVE_EXTENSION) -> list[str]:
    """List the filenames ``npm pack`` may have produced for a package.

    Args:
        identity: Package to encode.
        extension: Archive extension, including the dot.

    Returns:
        Unique candidate filenames, most likely first.
    """
    name = identity.name
    names = [
        name.replace("@", "", 1).replace("/", "-", 1),
        name.split("/", 1)[1] if "/" in name else name,
        name.replace("@", "").replace("/", "-"),
    ]

    candidates: list[str] = []
    for flat in names:
        filename = f"{flat}-{identity.version}{extension}"
        if filename not in candidates:
            candidates.append(filename)
    return candidates


@dataclass(frozen=True, slots=True)
class DecodedArchive:
    """Package identity recovered from an archive filename.

    Attributes:
        filename: The archive filename that was decoded.
        identity: Best guess at the package identity.
        flat_name: The name exactly as it appears in the filename.
    """

    filename: str
    identity: PackageIdentity
    flat_name: str

    @property
    def lookup_names(self) -> tuple[str, ...]:
        """Package names worth querying on a registry, best guess first."""
        if self.flat_name == self.identity.name or self.flat_name.startswith("@"):
            return (self.identity.name,)
        return (self.identity.name, self.flat_name)


def _rebuild_scope(flat_name: str) -> str:
    """Guess the scoped name hidden in a flattened name."""
    if "-" not in flat_name:
        return flat_name

    first, rest = flat_name.split("-", 1)
    scope = first.lstrip("@")
    if not scope or not rest or "." in scope:
        return flat_name
    return f"@{scope}/{rest}"


def decode_archive_filename(
    filename: str,
    extension: str = ARCHIVE_EXTENSION,
) -> DecodedArchive | None:
    """Recover a package identity from an archive filename.

    Args:
        filename: Archive filename, without directory.
        extension: Archive extension to strip, including the dot.

    Returns:
        DecodedArchive, or None when no version suffix can be found.
    """
    base = filename[: -len(extension)] if filename.endswith(extension) else filename

    match = _VERSION_SUFFIX.search(base)
    if match is None:
        return None

    version = match.group(1)
    flat_name = base[: match.start()]
    if not flat_name:
        return None

    return DecodedArchive(
        filename=filename,
        identity=PackageIdentity(name=_rebuild_scope(flat_name), version=version),
        flat_name=flat_name,
    )
