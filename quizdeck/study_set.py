"""Immutable study set model handed to the study engines.

A :class:`StudySet` is an ordered collection of :class:`Card` objects
(term/definition pairs with stable identifiers).  Engines only ever read
from it; every session works on derived copies.

The module also hosts the validation used by the set creation flow so that
hosts can turn loosely structured input (forms, imported decks, JSON) into
a set that satisfies the engines' assumptions.
"""

from __future__ import annotations

import random
import string
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

MIN_CARDS = 2
ID_LENGTH = 9
_ID_ALPHABET = string.digits + string.ascii_lowercase


class StudySetError(ValueError):
    """Raised when a study set does not satisfy the upstream validation."""


def generate_id(rng: Optional[random.Random] = None) -> str:
    """Return a short random base-36 identifier."""

    source = rng or random
    return "".join(source.choice(_ID_ALPHABET) for _ in range(ID_LENGTH))


@dataclass(frozen=True)
class Card:
    """A single term/definition pair."""

    id: str
    term: str
    definition: str

    def to_storage_dict(self) -> Dict[str, str]:
        return {"id": self.id, "term": self.term, "def": self.definition}


@dataclass(frozen=True)
class StudySet:
    """Read-only input to the flashcard, match and learn engines."""

    id: str
    title: str
    description: str = ""
    cards: Tuple[Card, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any sequence but store a tuple so sessions cannot mutate it.
        object.__setattr__(self, "cards", tuple(self.cards))
        if len(self.cards) < MIN_CARDS:
            raise StudySetError(
                f"Study set '{self.title}' needs at least {MIN_CARDS} cards, got {len(self.cards)}"
            )
        seen = set()
        for card in self.cards:
            if card.id in seen:
                raise StudySetError(f"Duplicate card id '{card.id}' in study set '{self.title}'")
            seen.add(card.id)

    def __len__(self) -> int:
        return len(self.cards)

    def card(self, card_id: str) -> Card:
        for card in self.cards:
            if card.id == card_id:
                return card
        raise KeyError(f"Card '{card_id}' not found in study set '{self.title}'")

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_storage(cls, payload: Mapping[str, Any]) -> "StudySet":
        if not isinstance(payload, Mapping):
            raise StudySetError(f"Study set records must be objects, got {type(payload).__name__}")
        cards = payload.get("cards") or []
        if not isinstance(cards, (list, tuple)):
            raise StudySetError("Study set cards must be a list")
        return build_study_set(
            payload.get("title") or "",
            cards,
            description=payload.get("description") or "",
            set_id=payload.get("id"),
        )

    def to_storage_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "cards": [card.to_storage_dict() for card in self.cards],
        }


CardInput = Union[Card, Mapping[str, Any], Sequence[str]]


def _coerce_card(entry: CardInput, rng: Optional[random.Random]) -> Card:
    if isinstance(entry, Card):
        return entry
    if isinstance(entry, Mapping):
        card_id = entry.get("id")
        definition = entry.get("def", entry.get("definition")) or ""
        return Card(
            id=str(card_id) if card_id not in (None, "") else generate_id(rng),
            term=str(entry.get("term") or ""),
            definition=str(definition),
        )
    if isinstance(entry, Sequence) and not isinstance(entry, (str, bytes)) and len(entry) >= 2:
        return Card(id=generate_id(rng), term=str(entry[0]), definition=str(entry[1]))
    raise StudySetError(f"Unsupported card entry: {entry!r}")


def build_study_set(
    title: str,
    cards: Iterable[CardInput],
    *,
    description: str = "",
    set_id: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> StudySet:
    """Validate user supplied data and build a :class:`StudySet`.

    Cards whose term and definition are both blank are dropped, missing
    ids are generated.  A blank title or fewer than two remaining cards
    raise :class:`StudySetError`.
    """

    if not str(title or "").strip():
        raise StudySetError("Please enter a title")

    valid: List[Card] = []
    for entry in cards:
        card = _coerce_card(entry, rng)
        if card.term.strip() or card.definition.strip():
            valid.append(card)
    if len(valid) < MIN_CARDS:
        raise StudySetError(f"Please add at least {MIN_CARDS} cards")

    return StudySet(
        id=str(set_id) if set_id not in (None, "") else generate_id(rng),
        title=str(title).strip(),
        description=str(description or ""),
        cards=tuple(valid),
    )


def sample_study_set() -> StudySet:
    """Built-in set used when no deck has been imported yet."""

    return StudySet(
        id="1",
        title="Biology 101: The Cell",
        description="Basic structure and function of cells",
        cards=(
            Card("c1", "Mitochondria", "The powerhouse of the cell; generates ATP."),
            Card("c2", "Nucleus", "Contains the cell's genetic material (DNA)."),
            Card("c3", "Ribosome", "The site of protein synthesis."),
            Card("c4", "Mitosis", "Process of cell division resulting in two identical daughter cells."),
            Card("c5", "Osmosis", "Movement of water molecules through a semi-permeable membrane."),
            Card("c6", "Chloroplast", "Organelle where photosynthesis occurs in plant cells."),
        ),
    )


__all__ = [
    "Card",
    "MIN_CARDS",
    "StudySet",
    "StudySetError",
    "build_study_set",
    "generate_id",
    "sample_study_set",
]
