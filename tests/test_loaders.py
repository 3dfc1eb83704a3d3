"""Tests for loading project and policy pack files."""

import pytest

from plugin_acquire import LoadError, PluginKind, load_policy_pack, load_project
from plugin_acquire.runtime import program_from_policy_pack, program_from_project


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


# --- project files ---


def test_load_project_with_string_runtime(tmp_path):
    project = load_project(_write(tmp_path / "Pulumi.yaml", "name: app\nruntime: nodejs\n"))
    assert project.name == "app"
    assert project.runtime.name == "nodejs"
    assert project.runtime.options == {}
    assert project.plugins == []


def test_load_project_with_runtime_options(tmp_path):
    path = _write(
        tmp_path / "Pulumi.yaml",
        "name: app\n"
        "runtime:\n"
        "  name: python\n"
        "  options:\n"
        "    virtualenv: venv\n"
        "main: src/\n"
        "description: demo\n",
    )
    project = load_project(path)
    assert project.runtime.name == "python"
    assert project.runtime.options == {"virtualenv": "venv"}
    assert project.main == "src/"
    assert project.description == "demo"


def test_load_project_plugins(tmp_path):
    path = _write(
        tmp_path / "Pulumi.yaml",
        "name: app\n"
        "runtime: go\n"
        "plugins:\n"
        "  - kind: resource\n"
        "    name: aws\n"
        "    version: 6.1.0\n"
        "  - kind: tool\n"
        "    name: esc\n"
        "    server: https://mirror.example.com/plugins\n",
    )
    aws, esc = load_project(path).plugins
    assert aws.kind is PluginKind.RESOURCE
    assert str(aws.version) == "6.1.0"
    assert esc.version is None
    assert esc.download_url == "https://mirror.example.com/plugins"


def test_extra_fields_are_kept(tmp_path):
    path = _write(tmp_path / "Pulumi.yaml", "name: app\nruntime: python\nbackend:\n  url: file://.\n")
    assert load_project(path).model_extra == {"backend": {"url": "file://."}}


def test_missing_file(tmp_path):
    with pytest.raises(LoadError, match="File not found") as exc_info:
        load_project(tmp_path / "Pulumi.yaml")
    assert exc_info.value.path == tmp_path / "Pulumi.yaml"


def test_invalid_yaml(tmp_path):
    path = _write(tmp_path / "Pulumi.yaml", "name: [unclosed\n")
    with pytest.raises(LoadError, match="Invalid YAML"):
        load_project(path)


def test_non_mapping_document(tmp_path):
    path = _write(tmp_path / "Pulumi.yaml", "- just\n- a list\n")
    with pytest.raises(LoadError, match="Expected a mapping"):
        load_project(path)


def test_missing_name(tmp_path):
    path = _write(tmp_path / "Pulumi.yaml", "runtime: python\n")
    with pytest.raises(LoadError, match="Invalid Pulumi.yaml"):
        load_project(path)


def test_bad_plugin_version(tmp_path):
    path = _write(
        tmp_path / "Pulumi.yaml",
        "name: app\nruntime: python\nplugins:\n  - kind: resource\n    name: aws\n    version: latest\n",
    )
    with pytest.raises(LoadError, match="invalid plugin version"):
        load_project(path)


# --- policy packs ---


def test_load_policy_pack(tmp_path):
    pack = load_policy_pack(_write(tmp_path / "PulumiPolicy.yaml", "runtime: python\nversion: 0.1.0\n"))
    assert pack.runtime.name == "python"
    assert pack.version == "0.1.0"
    assert pack.name is None


def test_policy_pack_requires_runtime(tmp_path):
    with pytest.raises(LoadError):
        load_policy_pack(_write(tmp_path / "PulumiPolicy.yaml", "name: pack\n"))


# --- program info ---


def test_program_dir_follows_main_directory(tmp_path):
    (tmp_path / "src").mkdir()
    path = _write(tmp_path / "Pulumi.yaml", "name: app\nruntime: python\nmain: src\n")
    program = program_from_project(path)
    assert program.root == tmp_path
    assert program.program_dir == tmp_path / "src"
    assert program.entry_point == "."


def test_main_file_keeps_root_as_program_dir(tmp_path):
    path = _write(tmp_path / "Pulumi.yaml", "name: app\nruntime: python\nmain: app.py\n")
    program = program_from_project(path)
    assert program.program_dir == tmp_path
    assert program.entry_point == "app.py"


def test_policy_pack_program_has_no_plugins(tmp_path):
    program = program_from_policy_pack(_write(tmp_path / "PulumiPolicy.yaml", "runtime: nodejs\n"))
    assert program.runtime == "nodejs"
    assert program.plugins == ()
