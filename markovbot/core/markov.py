"""
Incremental word-level Markov chain.

Learns which words follow which from observed messages and samples new
messages by walking the recorded transitions. Successor lists keep every
observation, so a transition seen twice is twice as likely to be replayed.
"""

import logging
import random

from ..protocol.errors import GenerationLimitError

logger = logging.getLogger(__name__)

# Sentinels contain whitespace so str.split() can never yield them as tokens
BEGIN = "## BOM ##"
END = "## EOM ##"

# Chain walked when nothing has been observed yet
SEED_CHAIN: dict[str, list[str]] = {
    BEGIN: ["Hello,"],
    "Hello,": ["World!"],
    "World!": [END],
    END: [END],
}


class TextModel:
    """
    Transition table from token to the tokens observed right after it.

    Features:
    - Append-only: tokens and edges are never removed
    - Seeded with a fixed greeting so generate() works before any observe()
    - Optional step bound on generation
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        max_steps: int | None = None,
    ):
        """
        Initialize the model with the seed chain.

        Args:
            rng: Random source for sampling (module-level random if omitted)
            max_steps: Abort generation after this many picks (unbounded if None)
        """
        self._table: dict[str, list[str]] = {
            token: list(successors) for token, successors in SEED_CHAIN.items()
        }
        self._rng = rng or random.Random()
        self.max_steps = max_steps
        self._edges = sum(len(successors) for successors in self._table.values())

    def observe(self, text: str) -> None:
        """
        Record the transitions of one message.

        Args:
            text: Message text, split on whitespace; empty text is ignored
        """
        tokens = text.split()
        if not tokens:
            return

        self._append(BEGIN, tokens[0])
        for current, following in zip(tokens, tokens[1:]):
            self._append(current, following)
        self._append(tokens[-1], END)

    def generate(self) -> str:
        """
        Sample a message by walking the chain from BEGIN until END is picked.

        Returns:
            Space-joined tokens, never empty

        Raises:
            GenerationLimitError: If max_steps is set and exceeded
        """
        words: list[str] = []
        token = BEGIN
        steps = 0

        while True:
            if self.max_steps is not None and steps >= self.max_steps:
                raise GenerationLimitError(self.max_steps)
            token = self._rng.choice(self._table[token])
            steps += 1
            if token == END:
                break
            words.append(token)

        message = " ".join(words)
        logger.debug(f"Generated {len(words)} tokens in {steps} steps")
        return message

    def successors(self, token: str) -> list[str]:
        """Get a copy of the successor list of a token (empty if unknown)."""
        return list(self._table.get(token, ()))

    def _append(self, token: str, following: str) -> None:
        self._table.setdefault(token, []).append(following)
        self._edges += 1

    @property
    def transitions(self) -> int:
        """Number of recorded transitions, seed chain included."""
        return self._edges

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, token: object) -> bool:
        return token in self._table
