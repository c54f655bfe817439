"""Export command - write habit data as JSON or CSV."""

from typing import Optional

from ..core.exceptions import StorageError
from ..utils.export import export_to_csv, export_to_json
from ..utils.io import atomic_write
from .base import BaseCommand


class ExportCommand(BaseCommand):
    """Command for exporting habits and completions."""

    def run(self, fmt: str = "json", output: Optional[str] = None) -> bool:
        """
        Export all data.

        Args:
            fmt: "json" (full backup) or "csv" (per-habit summary)
            output: File to write; printed to stdout when omitted

        Returns:
            True if successful, False otherwise
        """
        try:
            if fmt == "csv":
                content = export_to_csv(self.repository)
            else:
                content = export_to_json(self.repository, self.config)

            if not output:
                print(content)
                return True

            if not atomic_write(output, content):
                raise StorageError(f"Could not write export to {output}")
            print(f"📄 Exported {fmt.upper()} to: {output}")
            return True
        except Exception as exc:
            return self._fail("Export", exc)
