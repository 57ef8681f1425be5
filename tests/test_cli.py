#!/usr/bin/env python3
"""
End-to-end tests for the git-semver command line, with git replaced by
in-memory fakes.
"""

import sys
import os
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from git_semver import cli, git


@pytest.fixture
def repo(tmp_path, monkeypatch):
    """Run inside an empty directory with fake git tag commands."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('HOME', str(tmp_path / 'home'))
    monkeypatch.delenv('XDG_CONFIG_HOME', raising=False)

    state = {'tags': [], 'created': []}

    def list_tags():
        return list(state['tags'])

    def create_tag(tag_name, message, sign=False):
        if tag_name in state['tags']:
            raise git.TagCreationError("Command 'git tag' returned non-zero exit status 128.",
                                       output=f"fatal: tag '{tag_name}' already exists\n")
        state['tags'].append(tag_name)
        state['created'].append((tag_name, message, sign))

    monkeypatch.setattr(git, 'list_tags', list_tags)
    monkeypatch.setattr(git, 'create_tag', create_tag)
    return state


def test_get_prints_current_version(repo, capsys):
    repo['tags'] = ['1.0.0', '1.2.0', 'junk']
    assert cli.main(['get']) == 0
    assert capsys.readouterr().out.strip() == '1.2.0'


def test_get_without_versions_exits_2(repo, capsys):
    assert cli.main(['get']) == 2
    assert 'no valid semver tags found' in capsys.readouterr().err


def test_patch_creates_tag(repo, capsys):
    repo['tags'] = ['1.2.3']
    assert cli.main(['patch']) == 0
    assert capsys.readouterr().out.strip() == '1.2.4'
    assert repo['created'] == [('1.2.4', 'Version 1.2.4', False)]


def test_next_is_an_alias_for_patch(repo, capsys):
    repo['tags'] = ['1.2.3']
    assert cli.main(['next', '--dryrun']) == 0
    assert capsys.readouterr().out.strip() == '1.2.4'


@pytest.mark.parametrize('command', ['major', 'minor', 'patch'])
def test_first_version_is_0_1_0(repo, capsys, command):
    assert cli.main([command, '-d']) == 0
    assert capsys.readouterr().out.strip() == '0.1.0'
    assert repo['created'] == []


def test_prefix_and_sign_from_config_file(repo, capsys, tmp_path):
    (tmp_path / '.git-semver').write_text('VERSION_PREFIX=v\nGIT_SIGN=true\n')
    repo['tags'] = ['v1.0.0', 'v1.2.0', 'v2.0.0-beta', 'v2.0.0', '3.0.0']
    assert cli.main(['minor', '-p', 'rc.1', '-b', 'abc']) == 0
    assert capsys.readouterr().out.strip() == 'v2.1.0-rc.1+abc'
    assert repo['created'] == [('v2.1.0-rc.1+abc', 'Version v2.1.0-rc.1+abc', True)]


def test_pre_release_command(repo, capsys):
    repo['tags'] = ['1.4.0']
    assert cli.main(['pre-release', '--pre-release', 'beta.2']) == 0
    assert capsys.readouterr().out.strip() == '1.4.0-beta.2'


def test_build_command(repo, capsys):
    repo['tags'] = ['1.4.0']
    assert cli.main(['build', '-b', '20240101', '-d']) == 0
    assert capsys.readouterr().out.strip() == '1.4.0+20240101'


def test_pre_release_flag_is_required(repo):
    with pytest.raises(SystemExit):
        cli.main(['pre-release'])
    with pytest.raises(SystemExit):
        cli.main(['build'])


def test_invalid_pre_release_exits_3_without_tagging(repo, capsys):
    repo['tags'] = ['1.0.0']
    assert cli.main(['patch', '-p', 'not valid']) == 3
    assert repo['created'] == []
    assert capsys.readouterr().out == ''


def test_invalid_build_exits_3(repo):
    repo['tags'] = ['1.0.0']
    assert cli.main(['build', '-b', 'a..b']) == 3
    assert repo['created'] == []


def test_existing_tag_exits_3_with_git_output(repo, capsys):
    repo['tags'] = ['1.0.0', '1.0.1-rc.1']
    assert cli.main(['pre-release', '-p', 'rc.1']) == 3
    err = capsys.readouterr().err
    assert "already exists" in err


def test_listing_failure_exits_2(repo, monkeypatch, capsys):
    def broken():
        raise git.ExecutionError("Command 'git tag' returned non-zero exit status 128.",
                                 output='fatal: not a git repository\n')
    monkeypatch.setattr(git, 'list_tags', broken)
    assert cli.main(['patch']) == 2
    assert cli.main(['get']) == 2
    assert 'not a git repository' in capsys.readouterr().err


def test_bad_config_exits_1_before_git(repo, monkeypatch, tmp_path, capsys):
    (tmp_path / '.git-semver').write_text('GIT_SIGN=wibble\n')

    def unexpected():
        raise AssertionError("git should not be called")
    monkeypatch.setattr(git, 'list_tags', unexpected)
    assert cli.main(['patch']) == 1
    assert 'invalid boolean value' in capsys.readouterr().err


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, '-v']))
