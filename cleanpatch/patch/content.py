from dataclasses import dataclass


@dataclass(frozen=True)
class FileContent:
    """
    Text of a file split into lines without terminators.

    `missing_newline` is True when the last line is not followed by a newline.
    Carriage returns are left on the lines, so CRLF files only match diffs
    that carry the same carriage returns.
    """

    lines: tuple[str, ...] = ()
    missing_newline: bool = False

    @classmethod
    def from_text(cls, text: str) -> "FileContent":
        if text == "":
            return cls()
        lines = text.split("\n")
        if lines[-1] == "":
            return cls(tuple(lines[:-1]), False)
        return cls(tuple(lines), True)

    def to_text(self) -> str:
        if not self.lines:
            return ""
        text = "\n".join(self.lines)
        if self.missing_newline:
            return text
        return text + "\n"

    def lacks_newline_at(self, index: int) -> bool:
        return self.missing_newline and index == len(self.lines) - 1

    def __len__(self) -> int:
        return len(self.lines)
