"""
Prefix tokenizer for text commands.

Arguments look like ``n/John Doe i/E1234567``. A prefix only counts when it
starts the argument string or follows whitespace, so ``t/@a_b/c`` is a
single telegram value.
"""

import re
from typing import Dict, Iterable, List, Optional

from rollbook.core.exceptions import ParseError

PREFIX_NAME = "n/"
PREFIX_PHONE = "p/"
PREFIX_EMAIL = "e/"
PREFIX_NUSNETID = "i/"
PREFIX_TELEGRAM = "t/"
PREFIX_GROUP = "g/"
PREFIX_ASSIGNMENT = "a/"
PREFIX_WEEK = "w/"
PREFIX_STATUS = "status/"
PREFIX_FROM = "from/"
PREFIX_TO = "to/"


class ArgumentMultimap:
    """Values found for each prefix, plus the text before the first prefix."""

    def __init__(self, preamble: str, values: Dict[str, List[str]]):
        self.preamble = preamble
        self._values = values

    def get_value(self, prefix: str) -> Optional[str]:
        """Last value given for prefix, or None."""
        values = self._values.get(prefix)
        return values[-1] if values else None

    def get_all_values(self, prefix: str) -> List[str]:
        return list(self._values.get(prefix, []))

    def has(self, prefix: str) -> bool:
        return prefix in self._values

    def verify_no_duplicate_prefixes(self, *prefixes: str) -> None:
        duplicated = [p for p in prefixes if len(self._values.get(p, [])) > 1]
        if duplicated:
            raise ParseError(
                "Multiple values specified for the following single-valued field(s): "
                + " ".join(duplicated)
            )


def tokenize(args: str, prefixes: Iterable[str]) -> ArgumentMultimap:
    """
    Split args at every recognised prefix.

    Longer prefixes are tried first so ``status/`` is never read as ``s/``.
    """
    ordered = sorted(set(prefixes), key=len, reverse=True)
    if not ordered:
        return ArgumentMultimap(args.strip(), {})

    pattern = re.compile(r"(?<!\S)(" + "|".join(re.escape(p) for p in ordered) + ")")
    matches = list(pattern.finditer(args))
    if not matches:
        return ArgumentMultimap(args.strip(), {})

    preamble = args[: matches[0].start()].strip()
    values: Dict[str, List[str]] = {}
    for current, following in zip(matches, matches[1:] + [None]):
        end = following.start() if following else len(args)
        values.setdefault(current.group(1), []).append(args[current.end():end].strip())
    return ArgumentMultimap(preamble, values)
