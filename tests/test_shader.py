import pytest

from simuverse import shader
from simuverse.shader import (
    ShaderPreprocessor,
    ShaderSourceError,
    application_root_dir,
    insert_code_snippet,
    load_shader_source,
    preprocess_wgsl,
    regenerate_shader,
    texture_file_path,
)


def test_expand_plain_lines(tmp_path):
    assert ShaderPreprocessor(tmp_path).expand("a\nb\n") == "a\n b\n "


def test_expand_handles_crlf(tmp_path):
    assert ShaderPreprocessor(tmp_path).expand("a\r\nb") == "a\n b\n "


def test_expand_include_with_quotes(tmp_path):
    (tmp_path / "common.wgsl").write_text("fn f() {}\n")
    out = ShaderPreprocessor(tmp_path).expand('#include "common.wgsl"\nmain')
    assert out == "fn f() {}\n main\n "


def test_expand_multiple_and_nested(tmp_path):
    (tmp_path / "a.wgsl").write_text("A\n#include c.wgsl\n")
    (tmp_path / "b.wgsl").write_text("B\n")
    (tmp_path / "c.wgsl").write_text("C\n")
    out = ShaderPreprocessor(tmp_path, line_ending="\n").expand("#include a.wgsl,b.wgsl")
    assert out == "A\nC\nB\n"


def test_missing_include_raises(tmp_path):
    with pytest.raises(ShaderSourceError):
        ShaderPreprocessor(tmp_path).expand("#include nothing.wgsl")


def test_strip_comments(tmp_path):
    pre = ShaderPreprocessor(tmp_path, strip_comments=True, line_ending="\n")
    assert pre.expand("  // note\nx = 1; // keep\n") == "x = 1; // keep\n"


def test_comments_kept_by_default(tmp_path):
    assert ShaderPreprocessor(tmp_path).expand("// c") == "// c\n "


def test_insert_code_snippet():
    src = "a\n  #insert_code_snippet\nb"
    assert insert_code_snippet(src, "return v;") == "a\n return v;\n b\n "


def test_load_shader_source_with_snippet(tmp_path):
    wgsl = tmp_path / "wgsl"
    wgsl.mkdir()
    (wgsl / "util.wgsl").write_text("fn u() {}")
    (wgsl / "field.wgsl").write_text("#include util.wgsl\n#insert_code_snippet\n")
    out = load_shader_source(tmp_path, "field", "let x = 1;")
    assert out.splitlines()[0] == "fn u() {}"
    assert "let x = 1;" in out
    assert "#insert_code_snippet" not in out


def test_load_shader_source_missing(tmp_path):
    with pytest.raises(ShaderSourceError):
        load_shader_source(tmp_path, "absent")


def _make_assets(tmp_path):
    base = tmp_path / "pkg"
    base.mkdir()
    src = tmp_path / "assets" / "wgsl" / "lbm"
    src.mkdir(parents=True)
    (src / "init.wgsl").write_text("// header\ncode();\n")
    return base


def test_regenerate_shader(tmp_path):
    base = _make_assets(tmp_path)
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    path = regenerate_shader(base, "lbm/init", out_dir)
    assert path.name == "lbm_init.wgsl"
    assert path.read_text() == "code();\n"


def test_preprocess_wgsl_default_output(tmp_path):
    base = _make_assets(tmp_path)
    written = preprocess_wgsl(base, shader_names=["lbm/init"])
    assert len(written) == 1
    expected = tmp_path / "assets" / "preprocessed-wgsl" / "lbm_init.wgsl"
    assert written[0].resolve() == expected.resolve()


def test_preprocess_wgsl_missing_source(tmp_path):
    base = _make_assets(tmp_path)
    with pytest.raises(ShaderSourceError):
        preprocess_wgsl(base, shader_names=["lbm/absent"])


def test_application_root_override(monkeypatch, tmp_path):
    monkeypatch.setenv(shader.ROOT_ENV, str(tmp_path))
    assert application_root_dir() == str(tmp_path)
    assert texture_file_path("cloth.png") == tmp_path / "cloth.png"


def test_main_writes_files(tmp_path, capsys):
    base = _make_assets(tmp_path)
    assert shader.main(["--base-dir", str(base), "lbm/init"]) == 0
    assert "lbm_init.wgsl" in capsys.readouterr().out


def test_main_reports_missing(tmp_path):
    base = _make_assets(tmp_path)
    assert shader.main(["--base-dir", str(base), "nope"]) == 1