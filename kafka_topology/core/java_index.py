"""
Java Source Index

Static structural metadata for the Java types of an analyzed project:

- TypeDefinition: {package, name, kind, superclass, fields, imports}
- FieldDeclaration: {name, type_name, value}
- JavaSourceIndex: qualified name -> TypeDefinition, built once per run

Sources are parsed with regular expressions and a brace-depth scanner; only
top-level types and the fields declared directly in their bodies are kept.
Methods, initializer blocks and nested types are skipped.

Usage:
    index = JavaSourceIndex.build(Path("/path/to/project"))
    definition = index.resolve("com.acme.orders.kafka.OrderCreatedProducer")
    parent = index.superclass_of(definition)
"""

import logging
import os
import re
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional

from .exceptions import UnresolvedUnitError

logger = logging.getLogger(__name__)

SKIPPED_DIRECTORIES = {"target", "build", "node_modules"}

FIELD_MODIFIERS = {
    "public", "protected", "private", "static", "final", "transient", "volatile",
}

_COMMENT_RE = re.compile(
    r'("(?:\\.|[^"\\\n])*"|\'(?:\\.|[^\'\\\n])*\')|/\*.*?\*/|//[^\n]*',
    re.DOTALL,
)
_LITERAL_RE = re.compile(r'"(?:\\.|[^"\\\n])*"|\'(?:\\.|[^\'\\\n])*\'')
_PACKAGE_RE = re.compile(r'^\s*package\s+([\w.]+)\s*;', re.MULTILINE)
_IMPORT_RE = re.compile(r'^\s*import\s+(static\s+)?([\w.$]+?)(\.\*)?\s*;', re.MULTILINE)
_TYPE_RE = re.compile(r'\b(class|interface|enum|record)\s+([A-Za-z_$][\w$]*)')
_EXTENDS_RE = re.compile(r'\bextends\s+([\w.$]+)')
_ANNOTATION_RE = re.compile(r'@(?!interface\b)[\w.$]+\s*(?:\((?:[^()]|\([^()]*\))*\))?')
_GENERIC_RE = re.compile(r'<[^<>]*>')
_STRING_LITERAL_RE = re.compile(r'^"((?:\\.|[^"\\])*)"$')


# =============================================================================
# Definitions
# =============================================================================

@dataclass
class FieldDeclaration:
    """Field declared directly in a type body"""
    name: str
    type_name: str
    value: Optional[str] = None

    @property
    def simple_type(self) -> str:
        return self.type_name.rsplit('.', 1)[-1]


@dataclass
class TypeDefinition:
    """Top-level Java type"""
    name: str
    package: str = ""
    kind: str = "class"
    superclass: Optional[str] = None
    fields: List[FieldDeclaration] = field(default_factory=list)
    imports: Dict[str, str] = field(default_factory=dict)
    wildcard_imports: List[str] = field(default_factory=list)
    path: Optional[Path] = None

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.name}" if self.package else self.name

    def get_field(self, name: str) -> Optional[FieldDeclaration]:
        for declared in self.fields:
            if declared.name == name:
                return declared
        return None


# =============================================================================
# Parsing
# =============================================================================

def _strip_comments(text: str) -> str:
    return _COMMENT_RE.sub(lambda m: m.group(1) or " ", text)


def _strip_generics(text: str) -> str:
    previous = None
    while previous != text:
        previous = text
        text = _GENERIC_RE.sub('', text)
    return text


def _skip_literal(text: str, start: int) -> int:
    """Index just past the string or char literal opening at start"""
    quote = text[start]
    i = start + 1
    while i < len(text) and text[i] != quote:
        if text[i] == '\\':
            i += 1
        i += 1
    return i + 1


def _find_open_brace(text: str, start: int) -> int:
    i = start
    while i < len(text):
        char = text[i]
        if char in '"\'':
            i = _skip_literal(text, i)
            continue
        if char == '{':
            return i
        i += 1
    return -1


def _matching_brace(text: str, open_at: int) -> int:
    depth = 0
    i = open_at
    while i < len(text):
        char = text[i]
        if char in '"\'':
            i = _skip_literal(text, i)
            continue
        if char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return len(text)


def _blank_literals(text: str) -> str:
    """Same-length copy of text with string and char literal contents blanked"""
    return _LITERAL_RE.sub(lambda m: m.group(0)[0] + " " * (len(m.group(0)) - 2) + m.group(0)[-1], text)


def _iter_top_level_types(text: str) -> Iterator[tuple]:
    """Yield (kind, name, header, body) for every top-level type"""
    # keywords inside literals, e.g. annotation values, are not declarations
    searchable = _blank_literals(text)
    pos = 0
    while True:
        match = _TYPE_RE.search(searchable, pos)
        if match is None:
            return
        open_at = _find_open_brace(text, match.end())
        if open_at < 0:
            return
        close_at = _matching_brace(text, open_at)
        yield match.group(1), match.group(2), text[match.end():open_at], text[open_at + 1:close_at]
        pos = close_at + 1


def _iter_member_statements(body: str) -> Iterator[str]:
    """Yield the ';'-terminated statements at the top level of a type body"""
    buffer: List[str] = []
    parens = 0
    i = 0
    while i < len(body):
        char = body[i]
        if char in '"\'':
            end = _skip_literal(body, i)
            buffer.append(body[i:end])
            i = end
            continue
        if char == '{' and parens == 0:
            close_at = _matching_brace(body, i)
            statement = _ANNOTATION_RE.sub(' ', ''.join(buffer))
            if '=' in statement:
                # array, anonymous class or lambda initializer of a field
                buffer.append('{}')
            else:
                buffer = []
            i = close_at + 1
            continue
        if char == ';' and parens == 0:
            yield ''.join(buffer)
            buffer = []
        else:
            if char == '(':
                parens += 1
            elif char == ')':
                parens -= 1
            buffer.append(char)
        i += 1


def _split_declarators(text: str) -> List[str]:
    """Split 'Type a = 1, b, c = "x"' at commas outside nested brackets"""
    parts: List[str] = []
    depth = 0
    start = 0
    i = 0
    while i < len(text):
        char = text[i]
        if char in '"\'':
            i = _skip_literal(text, i)
            continue
        if char in '([{<':
            depth += 1
        elif char in ')]}>':
            depth = max(depth - 1, 0)
        elif char == ',' and depth == 0:
            parts.append(text[start:i])
            start = i + 1
        i += 1
    parts.append(text[start:])
    return parts


def _literal_value(initializer: str) -> Optional[str]:
    literal = _STRING_LITERAL_RE.match(initializer.strip())
    return literal.group(1).replace('\\"', '"') if literal else None


def _parse_field_statement(statement: str) -> List[FieldDeclaration]:
    text = _ANNOTATION_RE.sub(' ', statement)
    if '(' in text.partition('=')[0]:
        # method declaration without body
        return []

    declarators = _split_declarators(text)
    head, has_initializer, initializer = declarators[0].partition('=')
    words = [w for w in _strip_generics(head).split() if w not in FIELD_MODIFIERS]
    if len(words) != 2:
        return []
    type_name = words[0].replace('[]', '')

    fields = [FieldDeclaration(
        name=words[1].replace('[]', ''),
        type_name=type_name,
        value=_literal_value(initializer) if has_initializer else None,
    )]
    for declarator in declarators[1:]:
        name, has_initializer, initializer = declarator.partition('=')
        name = name.strip().replace('[]', '')
        if not name.isidentifier():
            continue
        fields.append(FieldDeclaration(
            name=name,
            type_name=type_name,
            value=_literal_value(initializer) if has_initializer else None,
        ))
    return fields


def parse_java_source(text: str, path: Optional[Path] = None) -> List[TypeDefinition]:
    """Parse the top-level type definitions of one compilation unit"""
    text = _strip_comments(text)

    package_match = _PACKAGE_RE.search(text)
    package = package_match.group(1) if package_match else ""

    imports: Dict[str, str] = {}
    wildcard_imports: List[str] = []
    for static, name, wildcard in _IMPORT_RE.findall(text):
        if static:
            continue
        if wildcard:
            wildcard_imports.append(name)
        else:
            imports[name.rsplit('.', 1)[-1]] = name

    definitions = []
    for kind, name, header, body in _iter_top_level_types(text):
        superclass = None
        if kind == "class":
            extends = _EXTENDS_RE.search(_strip_generics(header))
            superclass = extends.group(1) if extends else None

        fields: List[FieldDeclaration] = []
        for statement in _iter_member_statements(body):
            fields.extend(_parse_field_statement(statement))

        definitions.append(TypeDefinition(
            name=name,
            package=package,
            kind=kind,
            superclass=superclass,
            fields=fields,
            imports=dict(imports),
            wildcard_imports=list(wildcard_imports),
            path=path,
        ))
    return definitions


# =============================================================================
# Index
# =============================================================================

class JavaSourceIndex:
    """Lookup table from qualified type names to parsed definitions"""

    def __init__(self, definitions: Iterable[TypeDefinition] = ()):
        self.logger = logging.getLogger(__name__)
        self._by_name: Dict[str, TypeDefinition] = {}
        self._by_simple_name: Dict[str, List[TypeDefinition]] = defaultdict(list)
        for definition in definitions:
            self.add(definition)

    @classmethod
    def build(cls, root: Path) -> 'JavaSourceIndex':
        """Parse every .java file below root"""
        index = cls()
        root = Path(root)
        files = 0
        for current, dirs, filenames in os.walk(root):
            dirs[:] = sorted(d for d in dirs if not d.startswith('.') and d not in SKIPPED_DIRECTORIES)
            for filename in sorted(filenames):
                if not filename.endswith('.java'):
                    continue
                path = Path(current) / filename
                try:
                    text = path.read_text(encoding='utf-8', errors='replace')
                except OSError as e:
                    index.logger.warning(f"Could not read {path}: {e}")
                    continue
                index.add_source(text, path)
                files += 1
        index.logger.info(f"Indexed {len(index)} types from {files} Java files under {root}")
        return index

    def add(self, definition: TypeDefinition) -> None:
        name = definition.qualified_name
        if name in self._by_name:
            self.logger.debug(f"Duplicate definition of {name} ignored: {definition.path}")
            return
        self._by_name[name] = definition
        self._by_simple_name[definition.name].append(definition)

    def add_source(self, text: str, path: Optional[Path] = None) -> List[TypeDefinition]:
        definitions = parse_java_source(text, path)
        for definition in definitions:
            self.add(definition)
        return definitions

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, qualified_name: str) -> bool:
        return qualified_name in self._by_name

    def get(self, qualified_name: str) -> Optional[TypeDefinition]:
        return self._by_name.get(qualified_name)

    def resolve(self, qualified_name: str) -> TypeDefinition:
        definition = self._by_name.get(qualified_name)
        if definition is None:
            raise UnresolvedUnitError(qualified_name)
        return definition

    def find_by_simple_name(self, name: str) -> List[TypeDefinition]:
        return list(self._by_simple_name.get(name, []))

    def qualify(self, definition: TypeDefinition, type_name: str) -> List[str]:
        """Candidate qualified names for a type referenced from definition"""
        if '.' in type_name:
            return [type_name]
        if type_name in definition.imports:
            return [definition.imports[type_name]]
        candidates = [f"{definition.package}.{type_name}" if definition.package else type_name]
        candidates.extend(f"{package}.{type_name}" for package in definition.wildcard_imports)
        return candidates

    def resolve_type(self, definition: TypeDefinition, type_name: str) -> Optional[TypeDefinition]:
        """Definition of a type referenced from definition, if indexed"""
        for candidate in self.qualify(definition, type_name):
            if candidate in self._by_name:
                return self._by_name[candidate]
        if '.' in type_name or type_name in definition.imports:
            return None

        same_name = self._by_simple_name.get(type_name, [])
        if len(same_name) == 1:
            return same_name[0]
        return None

    def superclass_of(self, definition: TypeDefinition) -> Optional[TypeDefinition]:
        if not definition.superclass:
            return None
        return self.resolve_type(definition, definition.superclass)
