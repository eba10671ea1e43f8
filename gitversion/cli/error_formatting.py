"""Error formatting for CLI output."""

from gitversion.model.validation import ConfigurationParseError


def pretty_print_parse_error(error: ConfigurationParseError) -> str:
    """Format a ConfigurationParseError with the offending file location.

    Example output:
        Input should be 'None', 'Patch', 'Minor', 'Major' or 'Inherit' (key: branches.main.increment, in GitVersion.yml:4)
          --> GitVersion.yml:4
        3 |   main:
        4 |     increment: Huge
          |     ^^^^^^^^^^^^^^^
        5 |     label: ''
    """
    message_parts = [str(error)]

    if error.config_file and error.line_number:
        try:
            with open(error.config_file, "r") as f:
                lines = f.readlines()
        except OSError:
            lines = []

        if 0 < error.line_number <= len(lines):
            start_line = max(1, error.line_number - 1)
            end_line = min(len(lines), error.line_number + 1)
            width = len(str(end_line))

            location_info = f"\n  --> {error.config_file}:{error.line_number}\n"
            for line_idx in range(start_line, end_line + 1):
                line_content = lines[line_idx - 1].rstrip()
                location_info += f"{line_idx:>{width}} | {line_content}\n"

                if line_idx == error.line_number:
                    indent = len(line_content) - len(line_content.lstrip())
                    marker = " " * indent + "^" * max(1, len(line_content.strip()))
                    location_info += f"{' ' * width} | {marker}\n"

            message_parts.append(location_info.rstrip("\n"))

    return "".join(message_parts)
