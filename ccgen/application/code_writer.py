from datetime import datetime, timezone
from pathlib import Path

from ccgen.domain.errors import CodeWriteError
from ccgen.domain.models.generated_code import GeneratedCode
from ccgen.domain.models.provider_config import ProviderMode

DEFAULT_COMMENT_PREFIX = "//"

COMMENT_PREFIXES = {
    "python": "#",
    "py": "#",
    "ruby": "#",
    "rb": "#",
    "bash": "#",
    "sh": "#",
    "shell": "#",
    "zsh": "#",
    "yaml": "#",
    "yml": "#",
    "toml": "#",
    "r": "#",
    "perl": "#",
    "sql": "--",
    "lua": "--",
    "haskell": "--",
}

MODE_LABELS = {
    ProviderMode.OFFICIAL: "Official SDK",
    ProviderMode.DIRECT: "Direct API",
    ProviderMode.BEDROCK: "via AWS Bedrock",
}


def comment_prefix(language: str) -> str:
    """Line-comment marker for a language tag, "//" when unknown."""
    return COMMENT_PREFIXES.get(language.lower(), DEFAULT_COMMENT_PREFIX)


def render_generated_file(
    code: GeneratedCode,
    mode: ProviderMode,
    *,
    timestamp: datetime | None = None,
) -> str:
    """Render the metadata header followed by the generated code.

    Header lines: generator marker with mode label, ISO-8601 date, model name,
    and the explanation when there is one (every line commented). A single
    blank line separates the header from the code.
    """
    prefix = comment_prefix(code.language)
    timestamp = timestamp or datetime.now(timezone.utc)

    header = [
        f"{prefix} Generated by Claude Code SDK ({MODE_LABELS[mode]})",
        f"{prefix} Date: {timestamp.isoformat()}",
        f"{prefix} Model: {code.model_name}",
    ]
    if code.explanation:
        lines = code.explanation.splitlines()
        header.append(f"{prefix} Description: {lines[0]}")
        header.extend(f"{prefix} {line}".rstrip() for line in lines[1:])

    content = code.content if code.content.endswith("\n") else f"{code.content}\n"
    return "\n".join(header) + "\n\n" + content


def write_generated_code(code: GeneratedCode, output_path: Path, mode: ProviderMode) -> Path:
    """
    Write generated code with its metadata header.

    Contract:
    - Creates parent directories as needed.
    - Writes UTF-8 text, overwriting an existing file.

    Raises:
        CodeWriteError: If the directory or file cannot be written
    """
    text = render_generated_file(code, mode)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise CodeWriteError(f"Failed to write {output_path}: {e}") from e
    return output_path
