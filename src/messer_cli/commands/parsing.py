import re

# A thread name is either "quoted" or a single bare word.
TARGET = r'(?:"(?P<quoted>[^"]+)"|(?P<word>\S+))'


def compile_command(verbs: str, rest: str = "") -> re.Pattern[str]:
    return re.compile(rf"^\s*(?:{verbs})\s+{TARGET}{rest}\s*$", re.DOTALL)


def target(match: re.Match[str]) -> str:
    return match.group("quoted") or match.group("word")
