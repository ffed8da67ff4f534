"""Immutable step records and the fold that produces them.

A trace builder describes a run as a list of `Transform`s; `fold` threads the
working state through them and yields one `Step` per transform. The resulting
`Trace` is a fully materialised tuple, safe to index in any order.

Research / education only. Do NOT use in production.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, Iterator, List, Literal, Optional, Tuple

from .codec import (
    bits_to_bytes,
    bits_to_hex,
    block_to_hex,
    block_to_text,
    printable_mask,
    state_to_block,
)
from .des import FeistelDetails

Direction = Literal["encrypt", "decrypt"]

Operation = Literal[
    # AES
    "input",
    "block_to_state",
    "key_expansion",
    "add_round_key",
    "sub_bytes",
    "inv_sub_bytes",
    "shift_rows",
    "inv_shift_rows",
    "mix_columns",
    "inv_mix_columns",
    # DES
    "initial_input",
    "initial_permutation",
    "round",
    "swap",
    "final_permutation",
    # multi-block messages
    "block_division",
]


def _is_aes_state(state: Any) -> bool:
    return bool(state) and isinstance(state[0], tuple)


def state_bytes(state: Any) -> bytes:
    """Raw bytes of an AES state, a DES bit vector or a whole message."""
    if isinstance(state, (bytes, bytearray)):
        return bytes(state)
    if _is_aes_state(state):
        return state_to_block(state)
    return bits_to_bytes(state)


def state_hex(state: Any) -> str:
    if isinstance(state, (bytes, bytearray)) or _is_aes_state(state):
        return block_to_hex(state_bytes(state))
    return bits_to_hex(state)


@dataclass(frozen=True)
class Step:
    name: str
    description: str
    operation: Operation
    round_index: int
    state_before: Any
    state_after: Any
    round_key: Optional[Any] = None
    round_keys: Optional[Tuple[Any, ...]] = None
    feistel: Optional[FeistelDetails] = None

    @property
    def changes_state(self) -> bool:
        return self.state_before != self.state_after

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "operation": self.operation,
            "round": self.round_index,
            "state_before": state_hex(self.state_before),
            "state_after": state_hex(self.state_after),
        }
        if self.round_key is not None:
            d["round_key"] = state_hex(self.round_key)
        if self.round_keys is not None:
            d["round_keys"] = [state_hex(k) for k in self.round_keys]
        if self.feistel is not None:
            d["feistel"] = self.feistel.to_dict()
        return d

    def summary(self) -> str:
        return f"{self.name}: {state_hex(self.state_before)} -> {state_hex(self.state_after)}"


def _identity(state: Any) -> Any:
    return state


@dataclass(frozen=True)
class Transform:
    """One entry of a trace recipe: how to move the state and how to label it.

    `apply_with_detail`, when set, replaces `apply`: it returns the new state
    together with extra keyword fields for the `Step` (e.g. the Feistel
    intermediates).
    """
    name: str
    description: str
    operation: Operation
    round_index: int
    apply: Callable[[Any], Any] = _identity
    round_key: Optional[Any] = None
    round_keys: Optional[Tuple[Any, ...]] = None
    apply_with_detail: Optional[Callable[[Any], Tuple[Any, Dict[str, Any]]]] = None


def fold(initial: Any, transforms: Iterable[Transform]) -> Tuple[Step, ...]:
    """Thread `initial` through `transforms`, one immutable Step per transform."""
    steps: List[Step] = []
    state = initial
    for t in transforms:
        aux: Dict[str, Any] = {"round_key": t.round_key, "round_keys": t.round_keys}
        if t.apply_with_detail:
            after, extra = t.apply_with_detail(state)
            aux.update(extra)
        else:
            after = t.apply(state)
        steps.append(Step(
            name=t.name,
            description=t.description,
            operation=t.operation,
            round_index=t.round_index,
            state_before=state,
            state_after=after,
            **aux,
        ))
        state = after
    return tuple(steps)


@dataclass(frozen=True)
class Trace:
    """Complete, random-access record of one block run."""
    algorithm: str
    direction: Direction
    steps: Tuple[Step, ...]

    def __len__(self) -> int:
        return len(self.steps)

    def __getitem__(self, index):
        return self.steps[index]

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    @property
    def initial_state(self) -> Any:
        return self.steps[0].state_before

    @property
    def final_state(self) -> Any:
        return self.steps[-1].state_after

    @property
    def input(self) -> bytes:
        return state_bytes(self.initial_state)

    @property
    def output(self) -> bytes:
        return state_bytes(self.final_state)

    @property
    def output_hex(self) -> str:
        return block_to_hex(self.output)

    @property
    def output_text(self) -> str:
        return block_to_text(self.output)

    @property
    def output_printable(self) -> Tuple[bool, ...]:
        return printable_mask(self.output)

    def is_chain_consistent(self) -> bool:
        return all(
            a.state_after == b.state_before
            for a, b in zip(self.steps, self.steps[1:])
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "direction": self.direction,
            "input_hex": block_to_hex(self.input),
            "output_hex": self.output_hex,
            "output_text": self.output_text,
            "steps": [s.to_dict() for s in self.steps],
        }


@dataclass(frozen=True)
class MessageTrace:
    """Independent per-block traces of a message longer than one block."""
    algorithm: str
    direction: Direction
    blocks: Tuple[Trace, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.blocks)

    @property
    def input(self) -> bytes:
        return b"".join(t.input for t in self.blocks)

    def division_step(self) -> Step:
        """Informational first step: the message cut into blocks."""
        what = "ciphertext" if self.direction == "decrypt" else "input"
        size = len(self.blocks[0].input) if self.blocks else 0
        listing = ", ".join(block_to_hex(t.input) for t in self.blocks)
        return Step(
            name="Block Division",
            description=(
                f"Split {what} into {len(self.blocks)} block(s) of {size} bytes each: {listing}"
            ),
            operation="block_division",
            round_index=0,
            state_before=self.input,
            state_after=self.input,
        )

    @property
    def steps(self) -> Tuple[Step, ...]:
        """Block Division, then every block's steps prefixed by block."""
        total = len(self.blocks)
        out: List[Step] = [self.division_step()]
        for i, trace in enumerate(self.blocks, start=1):
            for s in trace.steps:
                out.append(replace(
                    s,
                    name=f"Block {i}: {s.name}",
                    description=f"Block {i}/{total}: {s.description}",
                ))
        return tuple(out)

    @property
    def output(self) -> bytes:
        return b"".join(t.output for t in self.blocks)

    @property
    def output_hex(self) -> str:
        return block_to_hex(self.output)

    @property
    def output_text(self) -> str:
        return "".join(t.output_text for t in self.blocks)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm": self.algorithm,
            "direction": self.direction,
            "input_hex": block_to_hex(self.input),
            "output_hex": self.output_hex,
            "output_text": self.output_text,
            "blocks": [t.to_dict() for t in self.blocks],
        }
