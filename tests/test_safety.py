from nlshell.commands.safety import (
    CommandSafetyChecker,
    SafetyClass,
    create_safety_checker,
    extract_command_name,
)


def test_read_only_command_is_safe_auto() -> None:
    verdict = CommandSafetyChecker().classify("ls -la")

    assert verdict.classification is SafetyClass.SAFE_AUTO
    assert verdict.auto_executable
    assert verdict.rule == "allow-list"


def test_sensitive_path_needs_confirmation_even_for_safe_command() -> None:
    verdict = CommandSafetyChecker().classify("cat /etc/passwd")

    assert verdict.classification is SafetyClass.NEEDS_CONFIRMATION
    assert verdict.rule == "denylist"
    assert any("/etc/passwd" in reason for reason in verdict.reasons)


def test_denylist_is_case_insensitive() -> None:
    verdict = CommandSafetyChecker().classify("cat ~/Secret.txt")

    assert verdict.classification is SafetyClass.NEEDS_CONFIRMATION
    assert verdict.rule == "denylist"


def test_metacharacters_need_confirmation() -> None:
    checker = CommandSafetyChecker()

    for command in ("ls | wc -l", "echo $HOME", "ls; pwd", "echo `id`", "ls > out.txt"):
        verdict = checker.classify(command)
        assert verdict.classification is SafetyClass.NEEDS_CONFIRMATION, command
        assert verdict.rule == "metacharacters"


def test_unknown_command_defaults_to_confirmation() -> None:
    verdict = CommandSafetyChecker().classify("rm -rf build")

    assert verdict.classification is SafetyClass.NEEDS_CONFIRMATION
    assert verdict.rule == "default"


def test_length_limit_blocks_before_other_rules() -> None:
    checker = CommandSafetyChecker(max_command_length=20)

    verdict = checker.classify("echo " + "a" * 30)

    assert verdict.classification is SafetyClass.BLOCKED
    assert verdict.rule == "length"


def test_path_prefixed_command_is_not_the_safe_builtin() -> None:
    assert extract_command_name("./ls -la") == "./ls"
    assert CommandSafetyChecker().classify("./ls").classification is SafetyClass.NEEDS_CONFIRMATION


def test_extra_safe_commands_from_config() -> None:
    checker = create_safety_checker({"extra_safe_commands": ["git"], "max_command_length": 500})

    assert checker.classify("git status").classification is SafetyClass.SAFE_AUTO


def test_classification_is_deterministic() -> None:
    checker = CommandSafetyChecker()

    first = checker.classify("find . -name '*.py'")
    second = checker.classify("find . -name '*.py'")

    assert first.classification is second.classification
    assert first.rule == second.rule
