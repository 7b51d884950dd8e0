"""Output formatters for SUBPACE."""

import csv
import io
import json
import sys
from typing import Optional, TextIO

from subpace.core.interfaces import OutputFormatter, ResolveStatus, ResolveTask


class TextFormatter(OutputFormatter):
    """Format results as plain text lines."""

    def __init__(self, show_ip: bool = False):
        """Initialize the text formatter.

        Args:
            show_ip: Whether to append resolved addresses to each line
        """
        self.show_ip = show_ip

    def format(self, task: ResolveTask, target: str) -> str:
        """Format a task as "<name> <Status>".

        Args:
            task: The completed task
            target: Target domain of the scan

        Returns:
            Formatted text line
        """
        line = f"{task.name(target)} {task.status}"
        if self.show_ip and task.status is ResolveStatus.RESOLVED and task.addresses:
            line += " " + ",".join(task.addresses)
        return line


class JSONFormatter(OutputFormatter):
    """Format results as JSON lines."""

    def format(self, task: ResolveTask, target: str) -> str:
        return json.dumps(self.to_dict(task, target))


class CSVFormatter(OutputFormatter):
    """Format results as CSV rows."""

    header = "name,subdomain,status,addresses"

    def format(self, task: ResolveTask, target: str) -> str:
        """Format a task as one CSV row.

        Args:
            task: The completed task
            target: Target domain of the scan

        Returns:
            Formatted CSV row without line terminator
        """
        output = io.StringIO()
        writer = csv.writer(output, lineterminator='')
        writer.writerow([
            task.name(target),
            task.subdomain,
            task.status.value,
            ' '.join(task.addresses)
        ])
        return output.getvalue()


class FormatterFactory:
    """Factory for creating output formatters."""

    @staticmethod
    def create_formatter(format_type: str, show_ip: bool = False) -> OutputFormatter:
        """Create an output formatter based on the format type.

        Args:
            format_type: Type of formatter (text, json, csv)
            show_ip: Whether to show IP addresses in text output

        Returns:
            OutputFormatter instance

        Raises:
            ValueError: If format type is invalid
        """
        if format_type == 'text':
            return TextFormatter(show_ip=show_ip)
        elif format_type == 'json':
            return JSONFormatter()
        elif format_type == 'csv':
            return CSVFormatter()
        else:
            raise ValueError(f"Invalid format type: {format_type}")


class ResultWriter:
    """Write one line per completed task to stdout or a file.

    Lines are flushed as they are written so results show up while the scan
    is still running. Use as a context manager to create the output file up
    front and close it afterwards.
    """

    def __init__(self, target: str, formatter: Optional[OutputFormatter] = None,
                 output_file: Optional[str] = None, stream: Optional[TextIO] = None):
        """Initialize the result writer.

        Args:
            target: Target domain of the scan
            formatter: Formatter for each line (defaults to text)
            output_file: Optional output file path
            stream: Stream to write to when no output file is given (defaults to stdout)
        """
        self.target = target
        self.formatter = formatter or TextFormatter()
        self.output_file = output_file
        self._stream = stream
        self._file = None
        self._header_written = False
        self.count = 0

    def open(self) -> None:
        """Create the output file, if any.

        Raises:
            OSError: If the output file cannot be created
        """
        if self.output_file and self._file is None:
            self._file = open(self.output_file, 'w', encoding='utf-8', newline='')

    @property
    def stream(self) -> TextIO:
        if self.output_file:
            self.open()
            return self._file
        return self._stream or sys.stdout

    def emit(self, task: ResolveTask) -> None:
        """Write a completed task.

        Args:
            task: Task in a terminal status

        Raises:
            ValueError: If the task is still pending
        """
        if not task.status.is_terminal:
            raise ValueError(f"Cannot emit pending task {task.subdomain!r}")

        stream = self.stream
        if self.formatter.header and not self._header_written:
            stream.write(self.formatter.header + "\n")
            self._header_written = True
        stream.write(self.formatter.format(task, self.target) + "\n")
        stream.flush()
        self.count += 1

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> 'ResultWriter':
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
