"""
Tests for the shlex-based structural extractor.
"""

import unittest

from cmdrisk.core.parser import (
    RedirectMode,
    ShlexExtractor,
    Word,
    get_literal,
    leading_stage,
    unwrap_command,
)


class TestShlexExtractor(unittest.TestCase):
    """Stage splitting, redirects and dynamic words."""

    def setUp(self):
        self.extractor = ShlexExtractor()

    def names(self, command):
        return [stage.name for stage in self.extractor.parse(command)]

    def test_pipeline_stages(self):
        self.assertEqual(self.names("cat f.txt | grep x | wc -l"), ["cat", "grep", "wc"])

    def test_every_separator_starts_a_stage(self):
        self.assertEqual(self.names("make && make test || echo failed; ls & pwd"),
                         ["make", "make", "echo", "ls", "pwd"])

    def test_newlines_separate_stages(self):
        self.assertEqual(self.names("cd /tmp\nrm -rf build"), ["cd", "rm"])

    def test_subshell_parentheses(self):
        self.assertEqual(self.names("(cd /tmp && rm -rf x)"), ["cd", "rm"])

    def test_leading_assignments_are_skipped(self):
        pipeline = self.extractor.parse("FOO=bar BAZ=1 make install")
        self.assertEqual(pipeline.stages[0].name, "make")
        self.assertEqual(pipeline.stages[0].args, ["install"])

    def test_quoted_operators_stay_in_words(self):
        pipeline = self.extractor.parse('echo "a | b; c"')
        self.assertEqual(len(pipeline), 1)
        self.assertEqual(pipeline.stages[0].args, ["a | b; c"])
        self.assertTrue(pipeline.stages[0].words[1].literal)

    def test_lone_quoted_or_escaped_operators_are_words(self):
        cases = {
            'grep ">" /etc/hosts': [">", "/etc/hosts"],
            "grep '|' notes.txt": ["|", "notes.txt"],
            "echo \\> /etc/passwd": [">", "/etc/passwd"],
            "echo '&&' \\;": ["&&", ";"],
        }
        for command, args in cases.items():
            with self.subTest(command=command):
                pipeline = self.extractor.parse(command)
                self.assertEqual(len(pipeline), 1)
                self.assertEqual(pipeline.stages[0].args, args)
                self.assertEqual(pipeline.stages[0].redirects, ())

    def test_escape_inside_double_quotes_keeps_backslash(self):
        pipeline = self.extractor.parse('echo "a\\|b" > out.txt')
        self.assertEqual(pipeline.stages[0].args, ["a\\|b"])
        self.assertEqual([r.target for r in pipeline.stages[0].redirects], ["out.txt"])

    def test_write_and_append_redirects(self):
        stage = self.extractor.parse("echo hi > out.txt").stages[0]
        self.assertEqual(stage.args, ["hi"])
        self.assertEqual(stage.redirects[0].target, "out.txt")
        self.assertEqual(stage.redirects[0].mode, RedirectMode.WRITE)

        stage = self.extractor.parse("echo hi >> log.txt").stages[0]
        self.assertEqual(stage.redirects[0].mode, RedirectMode.APPEND)

    def test_fd_redirects(self):
        stage = self.extractor.parse("make 2> errors.log").stages[0]
        self.assertEqual(stage.args, [])
        self.assertEqual(stage.redirects[0].target, "errors.log")

        stage = self.extractor.parse("make > build.log 2>&1").stages[0]
        self.assertEqual([r.target for r in stage.redirects], ["build.log"])

    def test_input_redirects_produce_no_writes(self):
        stage = self.extractor.parse("sort < in.txt").stages[0]
        self.assertEqual(stage.words, (Word("sort"),))
        self.assertEqual(stage.redirects, ())

    def test_command_substitution_is_one_dynamic_word(self):
        stage = self.extractor.parse("rm -rf $(pwd)/build").stages[0]
        self.assertEqual(stage.args, ["-rf", "$(pwd)/build"])
        self.assertFalse(stage.words[2].literal)

    def test_substitution_with_inner_pipeline(self):
        pipeline = self.extractor.parse("docker rm -f $(docker ps -aq | head -1)")
        self.assertEqual(len(pipeline), 1)
        self.assertEqual(pipeline.stages[0].args[-1], "$(docker ps -aq | head -1)")

    def test_backticks(self):
        stage = self.extractor.parse("echo `date`").stages[0]
        self.assertEqual(stage.args, ["`date`"])
        self.assertFalse(stage.words[1].literal)

    def test_variables_and_globs_are_dynamic(self):
        stage = self.extractor.parse("rm $HOME/tmp *.log notes.txt").stages[0]
        self.assertEqual([w.literal for w in stage.words[1:]], [False, False, True])

    def test_comments_are_ignored(self):
        self.assertEqual(self.names("ls -la # | rm -rf x"), ["ls"])
        self.assertEqual(self.names("# just a note\npwd"), ["pwd"])
        self.assertEqual(self.names("echo a#b"), ["echo"])

    def test_line_continuation(self):
        pipeline = self.extractor.parse("rm -rf \\\n  build")
        self.assertEqual(pipeline.stages[0].args, ["-rf", "build"])

    def test_empty_command(self):
        self.assertEqual(len(self.extractor.parse("")), 0)
        self.assertEqual(len(self.extractor.parse("   ")), 0)

    def test_unparsable_input_returns_none(self):
        for command in ('echo "unterminated', "echo $(date", "ls >", "cat <<<", "ls \x01"):
            with self.subTest(command=command):
                self.assertIsNone(self.extractor.parse(command))


class TestUnwrapping(unittest.TestCase):
    """sudo and wrapper handling."""

    def test_sudo_with_options(self):
        stage = ShlexExtractor().parse("sudo -u root -E rm -rf /tmp/x").stages[0]
        self.assertEqual(stage.name, "sudo")
        self.assertEqual(stage.effective_name, "rm")

    def test_nested_wrappers(self):
        words = tuple(Word(t) for t in ["nohup", "nice", "-n", "10", "env", "A=1", "rm", "x"])
        self.assertEqual([w.text for w in unwrap_command(words)], ["rm", "x"])

    def test_plain_command_is_unchanged(self):
        words = (Word("ls"), Word("-la"))
        self.assertEqual(unwrap_command(words), words)


def test_get_literal() -> None:
    assert get_literal(Word("notes.txt")) == "notes.txt"
    assert get_literal(Word("$HOME", literal=False)) is None


def test_leading_stage_fallback() -> None:
    stage = leading_stage('FOO=1 sudo rm -rf "unterminated | cat')
    assert [w.text for w in stage.words] == ["sudo", "rm", "-rf", "unterminated"]
    assert all(not w.literal for w in stage.words)
    assert leading_stage("   ").words == ()


if __name__ == "__main__":
    unittest.main()
