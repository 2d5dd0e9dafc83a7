"""
Best-effort structural extraction of shell command lines.

Splits a command into stages (every simple command between |, &&, ||, ;
and & is one stage), each with its words and output redirects. Command
substitutions are masked before tokenising so that they survive as single
opaque words instead of being split on their parentheses.

The extractor never raises: on syntax it cannot handle it returns None and
the caller falls back to pattern-only analysis.
"""

import logging
import re
import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class RedirectMode(Enum):
    """How a redirect writes to its target."""
    WRITE = "write"
    APPEND = "append"


@dataclass(frozen=True)
class Word:
    text: str
    literal: bool = True


@dataclass(frozen=True)
class Redirect:
    target: str
    mode: RedirectMode
    literal: bool = True


@dataclass(frozen=True)
class Stage:
    """One simple command of a command line."""
    words: Tuple[Word, ...] = ()
    redirects: Tuple[Redirect, ...] = ()

    @property
    def name(self) -> str:
        return self.words[0].text if self.words else ""

    @property
    def args(self) -> List[str]:
        return [word.text for word in self.words[1:]]

    def effective_words(self) -> Tuple[Word, ...]:
        """Words of the command that actually runs, past sudo and wrappers."""
        return unwrap_command(self.words)

    @property
    def effective_name(self) -> str:
        words = self.effective_words()
        return words[0].text if words else ""


@dataclass(frozen=True)
class Pipeline:
    stages: Tuple[Stage, ...] = ()

    def __iter__(self) -> Iterator[Stage]:
        return iter(self.stages)

    def __len__(self) -> int:
        return len(self.stages)


def get_literal(word: Word) -> Optional[str]:
    """
    Resolve a word to its literal text.

    Returns None for dynamic words (variables, command substitution,
    unexpanded globs). Callers that need the raw text anyway use word.text.
    """
    return word.text if word.literal else None


# sudo options that consume the following word
_SUDO_ARG_OPTIONS = frozenset({"-u", "-g", "-C", "-D", "-h", "-p", "-R", "-r", "-t", "-T", "-U"})

# Commands that run their arguments as another command
_WRAPPERS = {
    "nohup": frozenset(),
    "nice": frozenset({"-n"}),
    "time": frozenset(),
    "command": frozenset(),
    "exec": frozenset({"-a"}),
    "env": frozenset({"-u", "-C", "-S"}),
}

_ASSIGNMENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*=")

# Reserved words that can open a simple command without being its name
_LEADING_KEYWORDS = frozenset({"{", "}", "!", "if", "then", "else", "elif", "do", "while", "until"})


def unwrap_command(words: Sequence[Word]) -> Tuple[Word, ...]:
    """Strip sudo (with its options) and simple wrappers from the front."""
    words = tuple(words)
    i = 0
    while i < len(words):
        name = words[i].text
        if name == "sudo":
            i += 1
            while i < len(words) and words[i].text.startswith("-"):
                option = words[i].text
                i += 1
                if option == "--":
                    break
                if option in _SUDO_ARG_OPTIONS:
                    i += 1
            continue
        if name in _WRAPPERS:
            arg_options = _WRAPPERS[name]
            i += 1
            while i < len(words):
                text = words[i].text
                if text.startswith("-"):
                    i += 1
                    if text in arg_options:
                        i += 1
                elif name == "env" and _ASSIGNMENT.match(text):
                    i += 1
                else:
                    break
            continue
        break
    return words[i:]


class ParseError(ValueError):
    """Raised internally when a command line cannot be structured."""


# Operator tokens shlex can produce with punctuation_chars enabled
_SEPARATORS = frozenset({"|", "|&", "&&", "||", ";", ";;", "&", "(", ")"})
_WRITE_REDIRECTS = {
    ">": RedirectMode.WRITE,
    ">|": RedirectMode.WRITE,
    "&>": RedirectMode.WRITE,
    ">>": RedirectMode.APPEND,
    "&>>": RedirectMode.APPEND,
}
# Operators whose operand is not a written file
_OTHER_REDIRECTS = frozenset({"<", "<<", "<<<", "<>", ">&", "<&"})
_OPERATORS = sorted(_SEPARATORS | set(_WRITE_REDIRECTS) | _OTHER_REDIRECTS, key=len, reverse=True)
_QUOTABLE = "();<>|&"
_PUNCTUATION = frozenset(_QUOTABLE)

_PLACEHOLDER = re.compile(r"\x00(\d+)\x00")
# Quoted or escaped punctuation, kept out of shlex operator handling
_LITERAL = re.compile(r"\x01(\d)\x01")
_FD_PREFIX = re.compile(r"\d+(?=[<>])")
_GLOB_CHARS = frozenset("*?[")


def _split_operator(token: str) -> List[str]:
    """Split a run of punctuation such as ')|' or '>&' into operators."""
    ops = []
    rest = token
    while rest:
        for op in _OPERATORS:
            if rest.startswith(op):
                ops.append(op)
                rest = rest[len(op):]
                break
        else:
            raise ParseError(f"Unknown operator sequence: {token!r}")
    return ops


def _find_substitution_end(command: str, start: int) -> int:
    """Index just past the substitution opening at start, or -1."""
    if command[start] == "`":
        i = start + 1
        while i < len(command):
            if command[i] == "\\":
                i += 2
                continue
            if command[i] == "`":
                return i + 1
            i += 1
        return -1

    depth = 0
    quote = None
    i = start + 1  # at the opening parenthesis
    while i < len(command):
        ch = command[i]
        if ch == "\\" and quote != "'":
            i += 2
            continue
        if quote:
            if ch == quote:
                quote = None
        elif ch in "'\"":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return -1


def _mask(command: str) -> Tuple[str, List[str]]:
    """
    Replace substitutions with placeholders and normalise separators.

    Unquoted newlines become ';' and comments are dropped. Numeric fd
    prefixes on redirects ('2>', '1>>') are removed so they are not
    mistaken for arguments. Operator characters inside quotes or after a
    backslash are swapped for placeholders so that only real operators
    reach the tokenizer as punctuation.
    """
    out: List[str] = []
    subs: List[str] = []
    quote = None
    i = 0
    while i < len(command):
        ch = command[i]
        if ch == "\\" and quote != "'":
            escaped = command[i + 1:i + 2]
            if escaped and escaped in _PUNCTUATION:
                # Inside double quotes the backslash itself is kept
                out.append(("\\" if quote else "") + _literal(escaped))
            else:
                out.append(command[i:i + 2])
            i += 2
            continue
        if quote == "'":
            if ch == "'":
                quote = None
            out.append(_literal(ch) if ch in _PUNCTUATION else ch)
            i += 1
            continue
        if command.startswith("$(", i) or ch == "`" or (
            quote is None and ch in "<>" and command.startswith("(", i + 1)
        ):
            end = _find_substitution_end(command, i)
            if end < 0:
                raise ParseError("Unterminated command substitution")
            subs.append(command[i:end])
            out.append(f"\x00{len(subs) - 1}\x00")
            i = end
            continue
        if ch == '"':
            quote = None if quote == '"' else '"'
        elif quote is None:
            if ch == "'":
                quote = "'"
            elif ch == "\n":
                out.append(" ; ")
                i += 1
                continue
            elif ch == "#" and (i == 0 or command[i - 1] in " \t;|&("):
                # Comment runs to the end of the line
                end = command.find("\n", i)
                i = len(command) if end < 0 else end
                continue
            elif ch.isdigit() and (i == 0 or command[i - 1] in " \t;|&("):
                fd = _FD_PREFIX.match(command, i)
                if fd:
                    i = fd.end()
                    continue
        elif ch in _PUNCTUATION:
            out.append(_literal(ch))
            i += 1
            continue
        out.append(ch)
        i += 1
    return "".join(out), subs


def _literal(ch: str) -> str:
    return f"\x01{_QUOTABLE.index(ch)}\x01"


def _make_word(token: str, subs: List[str]) -> Word:
    dynamic = bool(_PLACEHOLDER.search(token))
    text = _PLACEHOLDER.sub(lambda m: subs[int(m.group(1))], token)
    text = _LITERAL.sub(lambda m: _QUOTABLE[int(m.group(1))], text)
    if "$" in text or "`" in text or _GLOB_CHARS & set(text):
        dynamic = True
    return Word(text=text, literal=not dynamic)


class StructuralExtractor(ABC):
    """Turns a command line into a Pipeline, or None when it cannot."""

    @abstractmethod
    def parse(self, command: str) -> Optional[Pipeline]:
        """
        Parse command into stages. Must never raise on malformed input.

        Args:
            command: Raw command line

        Returns:
            Pipeline, or None when no structure is available
        """
        pass


class ShlexExtractor(StructuralExtractor):
    """POSIX tokenizer from the standard shlex module, with operator support."""

    def parse(self, command: str) -> Optional[Pipeline]:
        if not command or not command.strip():
            return Pipeline()
        try:
            return self._parse(command)
        except ValueError as e:
            logger.debug(f"Falling back to pattern-only analysis for {command!r}: {e}")
            return None

    def _parse(self, command: str) -> Pipeline:
        if "\x00" in command or "\x01" in command:
            raise ParseError("Reserved control byte in command")
        masked, subs = _mask(command.replace("\\\n", ""))

        lexer = shlex.shlex(masked, posix=True, punctuation_chars=True)
        lexer.whitespace_split = True
        lexer.commenters = ""
        tokens = list(lexer)

        stages: List[Stage] = []
        words: List[Word] = []
        redirects: List[Redirect] = []
        pending: Optional[str] = None

        def flush() -> None:
            while words and (
                words[0].text in _LEADING_KEYWORDS
                or (words[0].literal and _ASSIGNMENT.match(words[0].text))
            ):
                words.pop(0)
            if words or redirects:
                stages.append(Stage(words=tuple(words), redirects=tuple(redirects)))
            words.clear()
            redirects.clear()

        for token in tokens:
            if token and set(token) <= _PUNCTUATION:
                for op in _split_operator(token):
                    if pending is not None:
                        raise ParseError(f"Missing target for redirect {pending!r}")
                    if op in _SEPARATORS:
                        flush()
                    else:
                        pending = op
                continue
            if pending is not None:
                word = _make_word(token, subs)
                mode = _WRITE_REDIRECTS.get(pending)
                if mode is not None:
                    redirects.append(Redirect(target=word.text, mode=mode, literal=word.literal))
                pending = None
                continue
            words.append(_make_word(token, subs))

        if pending is not None:
            raise ParseError(f"Missing target for redirect {pending!r}")
        flush()
        return Pipeline(stages=tuple(stages))


def leading_stage(command: str) -> Stage:
    """
    Whitespace fallback for the first simple command of a line.

    Used when parse() gave up, so that checks keyed on the leading command
    (sudo, blocked commands) still see it.
    """
    head = re.split(r"[|;&\n]", command, maxsplit=1)[0]
    texts = [text.strip("'\"") for text in head.split()]
    while texts and _ASSIGNMENT.match(texts[0]):
        texts.pop(0)
    return Stage(words=tuple(Word(text=text, literal=False) for text in texts if text))
