"""
Flat directory store of profile JSON files.

One file per profile, named ``<id>.json``. The store directory is always
passed in by the caller; nothing here reads a process-wide default.
"""

import json
import logging
from pathlib import Path
from typing import List, Union

from moulding_preview.profiles.model import ProfileDefinition
from moulding_preview.profiles.validator import (
    ProfileValidationError,
    ValidationIssue,
    ensure_valid,
)

logger = logging.getLogger(__name__)

PROFILE_SUFFIX = ".json"


class ProfileNotFoundError(Exception):
    """No profile file with the requested id exists in the store."""


def profile_path(profile_id: str, profiles_dir: Union[str, Path]) -> Path:
    return Path(profiles_dir) / f"{profile_id}{PROFILE_SUFFIX}"


def load_profile(filepath: Union[str, Path]) -> ProfileDefinition:
    """Load and validate one profile file.

    Raises:
        ProfileNotFoundError: if the file does not exist.
        ProfileValidationError: if the file is not valid JSON or breaks the schema.
    """
    path = Path(filepath)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ProfileNotFoundError(f"Profile file not found: {str(path)!r}")
    except json.JSONDecodeError as exc:
        raise ProfileValidationError(path, [
            ValidationIssue("INVALID_JSON", "$", f"not valid JSON ({exc.msg} at line {exc.lineno})"),
        ]) from exc

    ensure_valid(data, path)
    profile = ProfileDefinition.from_dict(data)
    if profile.id != path.stem:
        logger.warning("Profile id %r does not match file name %s", profile.id, path.name)
    logger.debug("Loaded profile %s (%d commands)", profile.id, len(profile.contour))
    return profile


def list_profiles(profiles_dir: Union[str, Path], strict: bool = False) -> List[ProfileDefinition]:
    """Load every profile in a store directory, sorted by name.

    Args:
        profiles_dir: store directory.
        strict: raise on the first invalid file instead of skipping it.

    Returns:
        Profiles sorted by (name, id); empty when the directory is missing.
    """
    directory = Path(profiles_dir)
    if not directory.is_dir():
        logger.info("Profile directory %s does not exist", directory)
        return []

    profiles: List[ProfileDefinition] = []
    for path in sorted(directory.glob(f"*{PROFILE_SUFFIX}")):
        try:
            profiles.append(load_profile(path))
        except ProfileValidationError as exc:
            if strict:
                raise
            logger.error("Skipping %s", exc)

    profiles.sort(key=lambda p: (p.name.lower(), p.id))
    logger.info("Found %d profiles in %s", len(profiles), directory)
    return profiles


def get_profile(profile_id: str, profiles_dir: Union[str, Path]) -> ProfileDefinition:
    """Load a profile by id from the store.

    Raises:
        ProfileNotFoundError: if ``<id>.json`` is absent.
        ProfileValidationError: if it fails validation.
    """
    path = profile_path(profile_id, profiles_dir)
    if not path.exists():
        raise ProfileNotFoundError(f"Profile {profile_id!r} not found in {profiles_dir}")
    return load_profile(path)


def save_profile(profile: ProfileDefinition, profiles_dir: Union[str, Path]) -> Path:
    """Write a profile as ``<id>.json``; an existing file is replaced.

    Returns:
        Path of the written file.
    """
    directory = Path(profiles_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = profile_path(profile.id, directory)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(profile.to_dict(), f, indent=2, ensure_ascii=False)
        f.write("\n")
    logger.info("Profile saved to %s", path)
    return path
