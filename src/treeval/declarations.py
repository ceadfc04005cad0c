"""
treeval Declarations
Stable identities for variables, parameters, fields and enum constants

Two occurrences of "the same variable" in a tree must map to the same lattice
key. Rather than relying on node identity, every declaration is issued by a
DeclarationArena and carries an opaque integer token; equality and hashing
use only that token.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional, Union


# Tokens are process-unique so declarations from different arenas never collide
_tokens = itertools.count(1)


#==============================================================================
# Declaration Records
#==============================================================================

class DeclarationKind(str, Enum):
    """What kind of storage a declaration names"""
    LOCAL = "local"
    PARAMETER = "parameter"
    FIELD = "field"


@dataclass(frozen=True)
class Declaration:
    """A variable-like declaration (local, parameter or field)"""
    id: int
    name: str = field(compare=False)
    decl_kind: DeclarationKind = field(default=DeclarationKind.LOCAL, compare=False)

    def __repr__(self) -> str:
        return f"Declaration({self.name}#{self.id})"


@dataclass(frozen=True)
class EnumConstant:
    """An enum entry such as Color.RED"""
    id: int
    name: str = field(compare=False)
    enum_type: str = field(default="", compare=False)

    @property
    def qualified_name(self) -> str:
        return f"{self.enum_type}.{self.name}" if self.enum_type else self.name

    def __repr__(self) -> str:
        return f"EnumConstant({self.qualified_name}#{self.id})"


Resolved = Union[Declaration, EnumConstant]


#==============================================================================
# Declaration Arena
#==============================================================================

class DeclarationArena:
    """
    Issues declaration records with stable identity tokens.

    The arena only grows; records are never removed or mutated.
    """

    def __init__(self) -> None:
        self._records: Dict[int, Resolved] = {}

    def declare(
        self,
        name: str,
        decl_kind: DeclarationKind = DeclarationKind.LOCAL,
    ) -> Declaration:
        """
        Create a new variable-like declaration.

        Args:
            name: Source name of the declaration
            decl_kind: Local, parameter or field

        Returns:
            A Declaration with a fresh identity token
        """
        decl = Declaration(next(_tokens), name, decl_kind)
        self._records[decl.id] = decl
        return decl

    def declare_parameter(self, name: str) -> Declaration:
        """Shorthand for declare(name, DeclarationKind.PARAMETER)"""
        return self.declare(name, DeclarationKind.PARAMETER)

    def declare_field(self, name: str) -> Declaration:
        """Shorthand for declare(name, DeclarationKind.FIELD)"""
        return self.declare(name, DeclarationKind.FIELD)

    def enum_constant(self, name: str, enum_type: str = "") -> EnumConstant:
        """
        Create a new enum constant.

        Args:
            name: Entry name (e.g. "RED")
            enum_type: Name of the owning enum (e.g. "Color")

        Returns:
            An EnumConstant with a fresh identity token
        """
        entry = EnumConstant(next(_tokens), name, enum_type)
        self._records[entry.id] = entry
        return entry

    def get(self, token: int) -> Optional[Resolved]:
        """Look up a record by its identity token"""
        return self._records.get(token)

    def __contains__(self, record: object) -> bool:
        return isinstance(record, (Declaration, EnumConstant)) and record.id in self._records

    def __iter__(self) -> Iterator[Resolved]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"DeclarationArena({len(self._records)} records)"
