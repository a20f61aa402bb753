"""Integration tests for grove config."""

from grove.core.config import Config
from grove.core.repository import Repository


class TestConfigCommand:
    def test_set_and_get(self, grove):
        grove('init')
        result = grove('config', 'set', 'user.name', 'Ada')
        assert result.exit_code == 0
        assert 'Set repository config: user.name = Ada' in result.output

        result = grove('config', 'get', 'user.name')
        assert result.exit_code == 0
        assert result.output == 'Ada\n'

    def test_identity_is_used_for_commits(self, grove, write, temp_dir):
        grove('init')
        grove('config', 'set', 'user.name', 'Ada')
        grove('config', 'set', 'user.email', 'ada@example.com')
        write('f.txt', 'x')
        grove('add', 'f.txt')
        grove('commit', '-m', 'first')

        repo = Repository(str(temp_dir))
        assert repo.read_commit(repo.refs.resolve_head()).author == 'Ada <ada@example.com>'

    def test_set_global_outside_repository(self, grove):
        result = grove('config', 'set', '--global', 'user.email', 'me@example.com')
        assert result.exit_code == 0
        assert Config().get('user', 'email') == 'me@example.com'

        result = grove('config', 'get', 'user.email')
        assert result.output == 'me@example.com\n'

    def test_set_repository_value_outside_repository(self, grove):
        result = grove('config', 'set', 'user.name', 'Ada')
        assert result.exit_code == 1
        assert 'Not a grove repository' in result.output

    def test_environment_wins(self, grove, monkeypatch):
        grove('init')
        grove('config', 'set', 'user.name', 'From File')
        monkeypatch.setenv('GROVE_USER_NAME', 'From Env')
        assert grove('config', 'get', 'user.name').output == 'From Env\n'

    def test_get_missing_key(self, grove):
        grove('init')
        result = grove('config', 'get', 'user.nickname')
        assert result.exit_code == 1
        assert 'Config key not found: user.nickname' in result.output

    def test_list(self, grove):
        grove('init')
        grove('config', 'set', '--global', 'user.name', 'Global')
        grove('config', 'set', 'user.name', 'Local')

        result = grove('config', 'list')
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert 'core.bare=false' in lines
        assert 'user.name=Local' in lines
        assert 'user.name=Global' not in lines

    def test_list_empty(self, grove):
        result = grove('config', 'list')
        assert result.exit_code == 0
        assert 'No configuration set' in result.output
