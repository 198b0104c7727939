from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from athenacli.dal.models import QueryResult


class ResultPresenter:
    """Render query results to the terminal."""

    def __init__(
        self, console: Optional[Console] = None, error_console: Optional[Console] = None
    ):
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)

    def build_table(self, result: QueryResult) -> Table:
        # Cells are wrapped in Text so values like "[1, 2]" are not read as markup.
        table = Table()
        for column in result.columns:
            table.add_column(Text(column), justify="left", overflow="fold")
        for row in result.rows:
            table.add_row(*(Text(cell) for cell in row))
        return table

    def print_result(self, result: QueryResult) -> None:
        if result.row_count == 0:
            return
        self.console.print(self.build_table(result))

    def print_error(self, message: str) -> None:
        self.error_console.print(Text.assemble(("FATAL ERROR: ", "bold red"), message))
