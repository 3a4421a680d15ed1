"""WGSL shader source loading, ``#include`` expansion and snippet insertion."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

INCLUDE_DIRECTIVE = "#include "
CODE_SNIPPET_MARKER = "#insert_code_snippet"
SHADER_FOLDER = "wgsl"
PREPROCESS_INPUT = Path("../assets/wgsl")
PREPROCESS_OUTPUT = Path("../assets/preprocessed-wgsl")
ROOT_ENV = "SIMUVERSE_ROOT"

SHADER_FILES: tuple[str, ...] = (
    "lbm/init",
    "lbm/collide_stream",
    "lbm/trajectory_present",
    "lbm/present",
    "lbm/particle_update",
    "lbm/blend_img",
    "lbm/boundary",
    "lbm/curl_update",
    "egui_layer_compose",
    "trajectory_update",
    "present",
    "field_setting",
    "noise/3d_noise_tex",
    "noise/sphere_tex",
    "pbd/cloth_display",
    "pbd/cloth_external_force",
    "pbd/xxpbd/cloth_bending_solver",
    "pbd/xxpbd/cloth_predict",
    "pbd/xxpbd/cloth_stretch_solver",
)


class ShaderSourceError(Exception):
    """A shader file could not be read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Unable to read {path}: {reason}")
        self.path = path


def _read(path: Path) -> str:
    try:
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ShaderSourceError(path, str(exc)) from exc


def _source_lines(source: str) -> list[str]:
    """Split on newlines, dropping one trailing empty line and any ``\\r``."""
    lines = source.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _is_comment_line(line: str) -> bool:
    return "//" in line and not line.split("//", 1)[0].strip()


class ShaderPreprocessor:
    """Expands ``#include`` lines relative to ``include_root``."""

    def __init__(
        self,
        include_root: str | os.PathLike[str],
        strip_comments: bool = False,
        line_ending: str = "\n ",
    ) -> None:
        self.include_root = Path(include_root)
        self.strip_comments = strip_comments
        self.line_ending = line_ending

    def expand(self, source: str) -> str:
        """Return ``source`` with every include directive inlined."""
        return "".join(self._expand(source))

    def _expand(self, source: str) -> Iterator[str]:
        for line in _source_lines(source):
            if line.startswith(INCLUDE_DIRECTIVE):
                for key in line[len(INCLUDE_DIRECTIVE):].split(","):
                    yield from self._expand(self.read_include(key))
            elif not (self.strip_comments and _is_comment_line(line)):
                yield line + self.line_ending

    def read_include(self, key: str) -> str:
        """Read the file an include key names; quotes in the key are ignored."""
        return _read(self.include_root / key.replace('"', ""))

    def load(self, shader_name: str) -> str:
        """Read ``<shader_name>.wgsl`` from the include root and expand it."""
        return self.expand(_read(self.include_root / f"{shader_name}.wgsl"))


def insert_code_snippet(source: str, snippet: str) -> str:
    """Replace every line holding the snippet marker with ``snippet``."""
    return "".join(
        (snippet if CODE_SNIPPET_MARKER in line else line) + "\n "
        for line in _source_lines(source)
    )


def load_shader_source(
    base_dir: str | os.PathLike[str] | None,
    shader_name: str,
    code_snippet: str | None = None,
) -> str:
    """Load a shader from ``<base_dir>/wgsl``, expanded and with the snippet inserted."""
    root = Path(base_dir) if base_dir is not None else Path(application_root_dir())
    source = ShaderPreprocessor(root / SHADER_FOLDER).load(shader_name)
    if code_snippet is None:
        return source
    return insert_code_snippet(source, code_snippet)


def regenerate_shader(
    base_dir: str | os.PathLike[str],
    shader_name: str,
    output_dir: str | os.PathLike[str] | None = None,
) -> Path:
    """Write the expanded, comment-stripped form of one shader; return its path."""
    base = Path(base_dir)
    preprocessor = ShaderPreprocessor(
        base / PREPROCESS_INPUT, strip_comments=True, line_ending="\n"
    )
    text = preprocessor.load(shader_name)
    out_dir = base / Path(output_dir if output_dir is not None else PREPROCESS_OUTPUT)
    out_path = out_dir / f"{shader_name.replace('/', '_')}.wgsl"
    out_path.write_bytes(text.encode("utf-8"))
    return out_path


def preprocess_wgsl(
    base_dir: str | os.PathLike[str],
    output_dir: str | os.PathLike[str] | None = None,
    shader_names: Iterable[str] | None = None,
) -> list[Path]:
    """Regenerate every shader; files that cannot be written are skipped."""
    base = Path(base_dir)
    out_dir = base / Path(output_dir if output_dir is not None else PREPROCESS_OUTPUT)
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for name in shader_names if shader_names is not None else SHADER_FILES:
        try:
            written.append(regenerate_shader(base, name, out_dir))
        except OSError:
            continue
    return written


def application_root_dir() -> str:
    """Directory holding the application assets."""
    override = os.environ.get(ROOT_ENV)
    if override:
        return override
    return str(Path(__file__).resolve().parent.parent / "assets")


def texture_file_path(name: str) -> Path:
    """Path of a texture file inside the application root."""
    return Path(application_root_dir()) / name


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="simuverse-wgsl", description="Expand WGSL includes into standalone shaders."
    )
    parser.add_argument("--base-dir", default=".", help="directory the asset paths start from")
    parser.add_argument("--output-dir", default=None, help="where expanded shaders go")
    parser.add_argument("shaders", nargs="*", help="shader names; all known shaders by default")
    args = parser.parse_args(argv)
    try:
        written = preprocess_wgsl(args.base_dir, args.output_dir, args.shaders or None)
    except ShaderSourceError as exc:
        print(exc, file=sys.stderr)
        return 1
    for path in written:
        print(path)
    return 0