# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from io import StringIO


class JDLWriter:
    """
    Accumulates `key = value;` entries of a JDL (Job Description Language) file.

    A single value is written as a bare integer when it only contains digits
    and as a quoted string otherwise. Several values are written as
    a brace-delimited list with one quoted value per line.
    """

    def __init__(self):
        self._buffer = StringIO()

    def comment(self, text: str) -> None:
        """Write a comment line."""
        self._buffer.write(f"# {text}\n")

    def output(self, key: str, *values: str | int) -> None:
        """
        Write a key with one or more values. Empty values are ignored.

        Raises:
            ValueError: If no non-empty value is provided.
        """
        items = [str(v) for v in values if str(v)]
        if not items:
            raise ValueError(f"No value provided for JDL key '{key}'.")

        self._buffer.write(f"{key} = ")
        if len(items) > 1:
            self._buffer.write("{\n")
            self._buffer.write(",\n".join(f'\t"{v}"' for v in items))
            self._buffer.write("\n}")
        elif items[0].isascii() and items[0].isdigit():
            self._buffer.write(str(int(items[0])))
        else:
            self._buffer.write(f'"{items[0]}"')
        self._buffer.write(";\n")

    def getText(self) -> str:
        """Get the JDL text written so far."""
        return self._buffer.getvalue()
