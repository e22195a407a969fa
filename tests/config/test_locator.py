"""Tests for kubeconfig file discovery."""

import os

from kubecfg.config.filesystem import LocalFileSystem
from kubecfg.config.locator import (
    find_kubeconfig_files,
    get_home_dir,
    get_kubeconfig_filenames,
    load_contents,
)


def test_home_dir_prefers_existing_home():
    env = {"HOME": "/home/alice", "USERPROFILE": "C:\\Users\\alice"}
    home = get_home_dir(lambda p: p == "/home/alice", env.get, windows=True)
    assert home == "/home/alice"


def test_home_dir_windows_fallbacks():
    env = {"HOME": "/missing", "HOMEDRIVE": "C:", "HOMEPATH": "\\Users\\bob"}
    assert get_home_dir(lambda p: p == "C:\\Users\\bob", env.get, windows=True) == "C:\\Users\\bob"

    env = {"USERPROFILE": "D:\\profiles\\bob"}
    assert get_home_dir(lambda p: p == "D:\\profiles\\bob", env.get, windows=True) == (
        "D:\\profiles\\bob"
    )


def test_home_dir_ignores_windows_variables_elsewhere(monkeypatch, tmp_path):
    monkeypatch.setattr("pathlib.Path.home", lambda: tmp_path)
    env = {"USERPROFILE": "/profiles/bob"}
    assert get_home_dir(lambda p: True, env.get, windows=False) == str(tmp_path)


def test_default_filename_under_home(make_probe):
    names = get_kubeconfig_filenames(make_probe(), home_dir="/home/alice")
    assert names == [os.path.join("/home/alice", ".kube", "config")]


def test_only_first_entry_of_kubeconfig_list(make_probe):
    probe = make_probe({"KUBECONFIG": os.pathsep.join(["/a/config", "/b/config"])})
    assert get_kubeconfig_filenames(probe, home_dir="/home/alice") == ["/a/config"]


def test_find_skips_missing_and_empty_files(make_probe, fake_fs):
    probe = make_probe({"KUBECONFIG": "/etc/kube/config"})
    assert find_kubeconfig_files(probe, fake_fs(), home_dir="/home") == []
    assert find_kubeconfig_files(probe, fake_fs({"/etc/kube/config": "  \n"}), "/home") == []

    fs = fake_fs({"/etc/kube/config": "apiVersion: v1\n"})
    assert [str(p) for p in find_kubeconfig_files(probe, fs, home_dir="/home")] == [
        "/etc/kube/config"
    ]


def test_find_skips_unreadable_file(make_probe, fake_fs, caplog):
    probe = make_probe({"KUBECONFIG": "/etc/kube/config"})
    fs = fake_fs(unreadable={"/etc/kube/config"})
    assert find_kubeconfig_files(probe, fs, home_dir="/home") == []
    assert "Could not load Kubernetes config file" in caplog.text


def test_discovery_can_be_disabled(make_probe, fake_fs):
    probe = make_probe(
        {"KUBECONFIG": "/etc/kube/config", "KUBERNETES_AUTH_TRYKUBECONFIG": "false"}
    )
    fs = fake_fs({"/etc/kube/config": "apiVersion: v1\n"})
    assert find_kubeconfig_files(probe, fs, home_dir="/home") == []


def test_find_on_real_filesystem(make_probe, write_kubeconfig, tmp_path):
    path = write_kubeconfig(name="home/.kube/config")
    files = find_kubeconfig_files(make_probe(), LocalFileSystem(), home_dir=str(tmp_path / "home"))
    assert files == [path]
    assert load_contents(path, LocalFileSystem()).startswith("\napiVersion")


def test_home_dir_checked_through_filesystem(make_probe, fake_fs):
    env = make_probe({"HOME": "/home/alice"})
    fs = fake_fs({"/home/alice/.kube/config": "apiVersion: v1\n"})

    assert get_kubeconfig_filenames(env, fs=fs) == ["/home/alice/.kube/config"]
    assert [str(p) for p in find_kubeconfig_files(env, fs)] == ["/home/alice/.kube/config"]
