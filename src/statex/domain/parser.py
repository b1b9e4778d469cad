"""Line oriented statement parser.

A DocumentType owns context rules, evaluated once against the whole
document, and Blocks. A Block finds every line matching its start pattern
and hands the following lines to its TransactionRule. The rule matches its
sections one line after the other, merges the named groups of all patterns
into a single field map and passes it, together with the document context,
to a builder function that returns the transaction.

Patterns always have to match a complete line.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Sequence, Union

from statex.domain.context import Context
from statex.domain.entities import Document, Item
from statex.domain.errors import (
    BuilderError,
    DefinitionError,
    SectionNotMatchedError,
    ValidationError,
    duplicate_field,
)

logger = logging.getLogger(__name__)

FieldMap = dict[str, str]
Builder = Callable[[FieldMap, Context], Any]
PatternLike = Union[str, re.Pattern]


def _compile(pattern: PatternLike) -> re.Pattern:
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


def _check_unique(names: Sequence[str]) -> None:
    seen = set()
    for name in names:
        if name in seen:
            raise DefinitionError(duplicate_field(name))
        seen.add(name)


@dataclass(frozen=True)
class Section:
    """Consecutive line patterns, one line per pattern.

    attributes are the mandatory fields; by default every named group is
    mandatory. Optional sections consume no line when they do not match.
    """

    patterns: tuple[re.Pattern, ...]
    attributes: tuple[str, ...] = ()
    name: Optional[str] = None
    optional: bool = False

    def __post_init__(self):
        patterns = tuple(_compile(p) for p in self.patterns)
        if not patterns:
            raise DefinitionError("A section needs at least one pattern")
        object.__setattr__(self, "patterns", patterns)

        names = [group for p in patterns for group in p.groupindex]
        _check_unique(names)

        attributes = tuple(self.attributes) or tuple(names)
        unknown = [a for a in attributes if a not in names]
        if unknown:
            raise DefinitionError(
                f"Attributes {', '.join(unknown)} are not captured by any pattern"
            )
        object.__setattr__(self, "attributes", attributes)
        if self.name is None:
            object.__setattr__(self, "name", ", ".join(attributes) or patterns[0].pattern)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(group for p in self.patterns for group in p.groupindex)

    def match(self, lines: Sequence[str], start: int, stop: int) -> Optional[tuple[FieldMap, int]]:
        """Match lines[start:stop] from its first line.

        Returns the captured fields and the index after the last consumed
        line, or None.
        """
        fields: FieldMap = {}
        position = start
        for pattern in self.patterns:
            if position >= stop:
                return None
            match = pattern.fullmatch(lines[position])
            if match is None:
                return None
            fields.update((k, v) for k, v in match.groupdict().items() if v is not None)
            position += 1

        if any(attribute not in fields for attribute in self.attributes):
            return None
        return fields, position


@dataclass(frozen=True)
class OneOf:
    """Ordered choice: the first candidate section that matches wins."""

    candidates: tuple[Section, ...]
    name: Optional[str] = None
    optional = False

    def __post_init__(self):
        candidates = tuple(self.candidates)
        if not candidates:
            raise DefinitionError("OneOf needs at least one candidate section")
        object.__setattr__(self, "candidates", candidates)
        if self.name is None:
            object.__setattr__(
                self, "name", " | ".join(f"({c.name})" for c in candidates)
            )

    @property
    def field_names(self) -> tuple[str, ...]:
        names: list[str] = []
        for candidate in self.candidates:
            names.extend(n for n in candidate.field_names if n not in names)
        return tuple(names)

    def match(self, lines: Sequence[str], start: int, stop: int) -> Optional[tuple[FieldMap, int]]:
        for candidate in self.candidates:
            result = candidate.match(lines, start, stop)
            if result is not None:
                return result
        return None


def section(
    *patterns: PatternLike,
    attributes: Sequence[str] = (),
    name: Optional[str] = None,
    optional: bool = False,
) -> Section:
    """Build a Section from pattern strings."""
    return Section(tuple(patterns), tuple(attributes), name, optional)


def one_of(*candidates: Section, name: Optional[str] = None) -> OneOf:
    """Build an ordered choice between sections."""
    return OneOf(tuple(candidates), name)


@dataclass(frozen=True)
class TransactionRule:
    """Sections producing a field map, and the builder consuming it.

    context_keys are copied from the document context into the field map
    before the sections are evaluated. wrap turns the build result into an
    Item and receives subject, line_number, block and failure_message.
    """

    sections: tuple[Union[Section, OneOf], ...]
    builder: Builder
    context_keys: tuple[str, ...] = ()
    wrap: Callable[..., Item] = Item

    def __post_init__(self):
        object.__setattr__(self, "sections", tuple(self.sections))
        object.__setattr__(self, "context_keys", tuple(self.context_keys))
        if not self.sections:
            raise DefinitionError("A transaction rule needs at least one section")
        names = list(self.context_keys)
        for s in self.sections:
            names.extend(s.field_names)
        _check_unique(names)

    def match(
        self, lines: Sequence[str], start: int, stop: int, context: Context
    ) -> tuple[FieldMap, int]:
        """Evaluate all sections from lines[start].

        Returns:
            The merged field map and the index after the last consumed line

        Raises:
            MissingContextError: If a context key is not set
            SectionNotMatchedError: If a mandatory section does not match
        """
        fields: FieldMap = {key: context.get(key) for key in self.context_keys}
        position = start
        for s in self.sections:
            result = s.match(lines, position, stop)
            if result is None:
                if s.optional:
                    continue
                line = lines[position] if position < stop else None
                raise SectionNotMatchedError(s.name, position + 1, line)
            captured, position = result
            fields.update(captured)
        return fields, position


@dataclass(frozen=True)
class Block:
    """A repeatable region starting at lines matching start.

    The rule sees the lines up to, not including, the next line matching end,
    or the next line matching start when there is no end pattern. Without an
    end pattern scanning resumes after the lines the rule consumed.
    """

    start: re.Pattern
    rule: TransactionRule
    end: Optional[re.Pattern] = None
    name: str = ""

    def __post_init__(self):
        object.__setattr__(self, "start", _compile(self.start))
        if self.end is not None:
            object.__setattr__(self, "end", _compile(self.end))
        if not self.name:
            object.__setattr__(self, "name", self.start.pattern)

    def _window_end(self, lines: Sequence[str], index: int) -> int:
        boundary = self.start if self.end is None else self.end
        for position in range(index + 1, len(lines)):
            if boundary.fullmatch(lines[position]):
                return position
        return len(lines)

    def extract(self, lines: Sequence[str], context: Context) -> Iterator[Item]:
        """Yield one item per match, in document order."""
        index = 0
        while index < len(lines):
            if self.start.fullmatch(lines[index]) is None:
                index += 1
                continue

            stop = self._window_end(lines, index)
            logger.debug("Block '%s' matched line %d", self.name, index + 1)
            item, consumed = self._evaluate(lines, index, stop, context)
            if item.failed:
                logger.warning("Line %d: %s", item.line_number, item.failure_message)
            yield item

            if self.end is not None:
                index = stop
            else:
                index = max(consumed, index + 1)

    def _evaluate(
        self, lines: Sequence[str], index: int, stop: int, context: Context
    ) -> tuple[Item, int]:
        wrap = self.rule.wrap
        line_number = index + 1
        try:
            fields, consumed = self.rule.match(lines, index, stop, context)
        except SectionNotMatchedError as e:
            return wrap(subject=None, line_number=line_number, block=self.name, failure_message=str(e)), index + 1

        try:
            subject = self.rule.builder(fields, context)
        except BuilderError as e:
            return wrap(subject=e.subject, line_number=line_number, block=self.name, failure_message=str(e)), consumed
        except ValidationError as e:
            return wrap(subject=None, line_number=line_number, block=self.name, failure_message=str(e)), consumed

        return wrap(subject=subject, line_number=line_number, block=self.name, failure_message=None), consumed


@dataclass(frozen=True)
class ContextRule:
    """Document level patterns, searched once over the whole document.

    Each pattern is looked for from the line after the previous pattern's
    match. When all patterns are found the captured fields are handed to
    assign, or stored in the context as they are.
    """

    patterns: tuple[re.Pattern, ...]
    assign: Optional[Callable[[Context, FieldMap], None]] = None

    def __post_init__(self):
        patterns = tuple(_compile(p) for p in self.patterns)
        if not patterns:
            raise DefinitionError("A context rule needs at least one pattern")
        object.__setattr__(self, "patterns", patterns)
        _check_unique([group for p in patterns for group in p.groupindex])

    def apply(self, lines: Sequence[str], context: Context) -> bool:
        fields: FieldMap = {}
        position = 0
        for pattern in self.patterns:
            for index in range(position, len(lines)):
                match = pattern.fullmatch(lines[index])
                if match:
                    fields.update((k, v) for k, v in match.groupdict().items() if v is not None)
                    position = index + 1
                    break
            else:
                return False

        if self.assign is not None:
            self.assign(context, fields)
        else:
            for key, value in fields.items():
                context.put(key, value)
        return True


def context_rule(
    *patterns: PatternLike, assign: Optional[Callable[[Context, FieldMap], None]] = None
) -> ContextRule:
    """Build a ContextRule from pattern strings."""
    return ContextRule(tuple(patterns), assign)


class DocumentType:
    """One statement family of an institution.

    markers are searched in the full text; any of them identifies the
    document, or all of them with match_all. By default the name itself is
    the marker. Blocks and context rules can only be added until the type is
    sealed.
    """

    def __init__(
        self,
        name: str,
        markers: Optional[Sequence[PatternLike]] = None,
        match_all: bool = False,
        context_rules: Sequence[ContextRule] = (),
    ):
        self.name = name
        self.markers = tuple(_compile(m) for m in (markers or [re.escape(name)]))
        self.match_all = match_all
        self._context_rules: list[ContextRule] = list(context_rules)
        self._blocks: list[Block] = []
        self._sealed = False

    @property
    def blocks(self) -> tuple[Block, ...]:
        return tuple(self._blocks)

    @property
    def context_rules(self) -> tuple[ContextRule, ...]:
        return tuple(self._context_rules)

    @property
    def sealed(self) -> bool:
        return self._sealed

    def _check_not_sealed(self) -> None:
        if self._sealed:
            raise DefinitionError(
                f"Document type '{self.name}' is in use and can no longer be changed"
            )

    def add_context_rule(self, rule: ContextRule) -> None:
        self._check_not_sealed()
        self._context_rules.append(rule)

    def add_block(self, block: Block) -> None:
        self._check_not_sealed()
        self._blocks.append(block)

    def seal(self) -> None:
        self._sealed = True

    def matches(self, text: str) -> bool:
        found = (marker.search(text) is not None for marker in self.markers)
        return all(found) if self.match_all else any(found)

    def build_context(self, document: Document) -> Context:
        """Run the context rules once against the whole document."""
        context = Context()
        for rule in self._context_rules:
            if not rule.apply(document.lines, context):
                logger.debug("Context rule %s found nothing", [p.pattern for p in rule.patterns])
        return context

    def parse(self, document: Document) -> list[Item]:
        """Extract the items of all blocks, block by block in registration order.

        Raises:
            MissingContextError: If a rule needs a context value the document lacks
        """
        context = self.build_context(document)
        items: list[Item] = []
        for block in self._blocks:
            items.extend(block.extract(document.lines, context))
        return items

    def __repr__(self) -> str:
        return f"DocumentType({self.name!r})"
