"""Integration tests for grove diff and grove status."""

from grove.core.repository import Repository


def commit_all(grove, message):
    grove('add', '.')
    return grove('commit', '-m', message)


class TestDiffCommand:
    def test_index_vs_working_copy(self, grove, write, temp_dir):
        grove('init')
        write('a.txt', 'a')
        write('b.txt', 'b')
        commit_all(grove, 'first')

        write('a.txt', 'changed')
        (temp_dir / 'b.txt').unlink()

        result = grove('diff')
        assert result.exit_code == 0
        assert result.output.splitlines() == ['M a.txt', 'D b.txt']

    def test_between_commits(self, grove, write, temp_dir):
        grove('init')
        write('a.txt', 'a')
        write('b.txt', 'b')
        commit_all(grove, 'first')
        first = Repository(str(temp_dir)).refs.resolve_head()

        write('a.txt', 'changed')
        write('c.txt', 'c')
        commit_all(grove, 'second')

        result = grove('diff', first, 'main')
        assert result.exit_code == 0
        assert result.output.splitlines() == ['M a.txt', 'A c.txt']

    def test_no_changes(self, grove, write):
        grove('init')
        write('a.txt', 'a')
        commit_all(grove, 'first')
        result = grove('diff')
        assert result.exit_code == 0
        assert result.output == ''

    def test_unknown_revision(self, grove):
        grove('init')
        result = grove('diff', 'nope')
        assert result.exit_code == 1
        assert 'unknown revision' in result.output


class TestStatusCommand:
    def test_fresh_repository(self, grove):
        grove('init')
        result = grove('status')
        assert result.exit_code == 0
        assert 'On branch main' in result.output
        assert 'No commits yet' in result.output

    def test_sections(self, grove, write):
        grove('init')
        write('a.txt', 'a')
        write('b.txt', 'b')
        commit_all(grove, 'first')

        write('a.txt', 'staged')
        grove('add', 'a.txt')
        write('b.txt', 'unstaged')
        write('new.txt', 'untracked')

        result = grove('status')
        assert result.exit_code == 0
        assert 'Changes to be committed:\n  M a.txt' in result.output
        assert 'Changes not staged for commit:\n  M b.txt' in result.output
        assert 'Untracked files:\n  new.txt' in result.output

    def test_clean(self, grove, write):
        grove('init')
        write('a.txt', 'a')
        commit_all(grove, 'first')
        result = grove('status')
        assert 'nothing to commit, working tree clean' in result.output
