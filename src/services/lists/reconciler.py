"""
MassBan - List Reconciler
=========================

Works out which names from a remote list still need a command.

DESIGN:
    work set = remote list - progress file, empty entries dropped,
    duplicates dropped, remote order kept. Nothing is written here; the
    progress file only grows when the executor confirms a command.
"""

from typing import Iterable, List, NamedTuple

from src.core.constants import OK_RESPONSE_STATUSES
from src.core.errors import RemoteFetchError
from src.core.logger import logger
from src.services.lists.fetcher import ListFetcher
from src.services.lists.progress import ProgressFile


class ReconcileResult(NamedTuple):
    """Names still to action and how many there are."""

    names: List[str]
    count: int


def split_list(body: str, separator: str) -> List[str]:
    """Split a list body on its separator, keeping empty entries."""
    return body.split(separator)


def difference(remote: Iterable[str], local: Iterable[str]) -> List[str]:
    """Entries of remote that are absent from local, in remote order."""
    seen = set(local)
    return [name for name in remote if name not in seen]


def sanitize(names: Iterable[str]) -> List[str]:
    """Drop empty entries and repeats, keeping the first occurrence."""
    return list(dict.fromkeys(name for name in names if name))


async def reconcile(
    fetcher: ListFetcher,
    url: str,
    progress: ProgressFile,
    remote_separator: str,
) -> ReconcileResult:
    """
    Diff a remote list against a progress file.

    Args:
        fetcher: Collaborator used to download the list.
        url: Remote list location.
        progress: Progress file of the pass.
        remote_separator: Separator used by the remote list.

    Returns:
        ReconcileResult with the sanitized work set.

    Raises:
        RemoteFetchError: Status outside 200/201 or transport failure.
        LocalReadError: Progress file missing or unreadable.
    """
    logger.info("Acquiring list...")

    response = await fetcher.fetch(url)
    if response.status not in OK_RESPONSE_STATUSES:
        raise RemoteFetchError(url, status=response.status)

    logger.info("List acquired!")

    remote = split_list(response.text, remote_separator)
    local = progress.read_names()

    names = sanitize(difference(remote, local))

    logger.debug(f"Reconciled {len(remote)} remote entries against {len(local)} stored: {len(names)} new")

    return ReconcileResult(names=names, count=len(names))


__all__ = [
    "ReconcileResult",
    "split_list",
    "difference",
    "sanitize",
    "reconcile",
]
