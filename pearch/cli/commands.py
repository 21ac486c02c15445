"""
PE Architecture Scanner - CLI interface powered by argparse and rich.

Commands:
  - detect: detect the architecture of one or more files
  - scan-dir: scan a folder (recursively by default)
  - watch: start a real-time watcher (on-create/on-modify)
  - history: show scans stored in the database
  - machine-types: print the machine type lookup table
  - list-modules: list registered modules
  - stats: show scanner statistics

Exit status: 0 when every file could be read (whatever its detection outcome),
1 when at least one file had an I/O failure or the command failed, 130 on Ctrl-C.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress
from rich.table import Table

from pearch.core.analyzer import ArchitectureScanner, ScanResult
from pearch.core.config import load_config
from pearch.core.detector import MACHINE_TYPES
from pearch.modules import create_default_modules
from pearch.reporting import csv_reporter, json_reporter

console = Console()

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

STATUS_STYLES = {
    "recognized": "green",
    "not_recognized": "dim",
    "invalid": "yellow",
    "error": "red",
}


class PEArchCLI:
    """CLI wrapper over the scan engine."""

    def __init__(self, config: dict, db_path: Optional[str] = None):
        self.config = config
        self.scanner = ArchitectureScanner(config)
        self._register_modules()

        db_cfg = config.get("database", {})
        if db_path is None and db_cfg.get("enabled"):
            db_path = db_cfg.get("path")
        self.db_path = db_path
        self.repository = None

    def _register_modules(self):
        for module in create_default_modules(self.config):
            self.scanner.plugin_manager.register_module(module)

    def _get_repository(self):
        if self.repository is None:
            from pearch.database.repository import ScanRepository

            self.repository = ScanRepository(self.db_path)
        return self.repository

    def close(self):
        if self.repository is not None:
            self.repository.close()

    def detect(self, file_paths: List[str], output: Optional[str] = None, workers: Optional[int] = None) -> int:
        """Detect the architecture of the given files."""
        with Progress(console=console, transient=True) as progress:
            task = progress.add_task("Scanare...", total=None)
            results = self.scanner.scan_batch(file_paths, workers=workers)
            progress.update(task, completed=True)
        return self._finish(results, output)

    def scan_directory(
        self,
        directory: str,
        recursive: bool = True,
        extensions: Optional[List[str]] = None,
        output: Optional[str] = None,
        workers: Optional[int] = None,
    ) -> int:
        """Scan a directory."""
        directory_path = Path(directory)
        if not directory_path.is_dir():
            console.print(f"[red]Director invalid:[/red] {directory}")
            return EXIT_FAILURE

        files = self.scanner.collect_files(directory, recursive=recursive, extensions=extensions)
        console.print(f"[cyan]Scanare {len(files)} fisiere din {directory_path}[/cyan]")
        with Progress(console=console, transient=True) as progress:
            task = progress.add_task("Procesare...", total=None)
            results = self.scanner.scan_batch([str(p) for p in files], workers=workers)
            progress.update(task, completed=True)
        return self._finish(results, output)

    def watch_paths(self, paths: List[str], recursive: bool = True):
        """Start real-time watcher; blocks the thread."""
        from pearch.watch.watcher import start_watch

        console.print(f"[cyan]Pornire watcher pe {paths}[/cyan]")

        def _on_result(result: ScanResult):
            self._persist([result])
            style = STATUS_STYLES.get(result.status, "white")
            console.print(
                f"[magenta]WATCH[/magenta] {Path(result.file_path).name} -> "
                f"[{style}]{_describe(result)}[/{style}]"
            )

        start_watch(paths=paths, scanner=self.scanner, recursive=recursive, on_result=_on_result)

    def show_history(self, limit: int = 50, status: Optional[str] = None) -> int:
        if not self.db_path:
            console.print("[red]Baza de date nu este configurata (folositi --db).[/red]")
            return EXIT_FAILURE

        records = self._get_repository().list_scans(limit=limit, status=status)
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Data", style="dim")
        table.add_column("Fisier", style="cyan")
        table.add_column("Status")
        table.add_column("Arhitectura")
        table.add_column("SHA256", style="dim")
        for rec in records:
            style = STATUS_STYLES.get(rec.status, "white")
            table.add_row(
                rec.timestamp.strftime("%Y-%m-%d %H:%M:%S") if rec.timestamp else "-",
                rec.file_name or "-",
                f"[{style}]{rec.status}[/{style}]",
                rec.architecture or rec.reason or "-",
                (rec.sha256 or "-")[:16],
            )
        console.print(table)
        return EXIT_OK

    def list_machine_types(self):
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Valoare", style="cyan")
        table.add_column("Arhitectura")
        for value, name in MACHINE_TYPES.items():
            table.add_row(f"0x{value:04X}", name)
        console.print(table)

    def list_modules(self):
        """List all registered modules."""
        console.print("\n[bold cyan]Module disponibile[/bold cyan]\n")

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Modul", style="cyan")
        table.add_column("Status", justify="center")
        table.add_column("Versiune")

        for module_name in self.scanner.plugin_manager.list_modules():
            module = self.scanner.plugin_manager.get_module(module_name)
            status = "Activ" if module and module.enabled else "Inactiv"
            status_style = "green" if module and module.enabled else "red"
            metadata = module.get_metadata() if module else {}
            table.add_row(module_name, f"[{status_style}]{status}[/{status_style}]", metadata.get("version", "N/A"))

        console.print(table)

    def show_statistics(self):
        """Display statistics from the scan history, or from this process without --db."""
        stats = self.scanner.get_statistics()
        title = "Statistici (proces curent)"
        if self.db_path:
            counts = self._get_repository().status_counts()
            stats.update(counts)
            stats["total_scans"] = sum(counts.values())
            title = "Statistici (istoric)"
        panel = Panel(
            f"""[bold]Total scanari:[/bold] {stats['total_scans']}
[bold green]Recunoscute:[/bold green] {stats['recognized']}
[bold]Nerecunoscute:[/bold] {stats['not_recognized']}
[bold yellow]Invalide:[/bold yellow] {stats['invalid']}
[bold red]Erori:[/bold red] {stats['error']}

[bold]Module active:[/bold] {len(stats['registered_modules'])}""",
            title=title,
            border_style="cyan",
        )
        console.print(panel)

    # ---------------- internal helpers ---------------- #
    def _finish(self, results: List[ScanResult], output: Optional[str]) -> int:
        self._display_results(results)
        self._persist(results)
        if output:
            self._save_report(results, output)
        return EXIT_FAILURE if any(r.io_error for r in results) else EXIT_OK

    def _persist(self, results: List[ScanResult]):
        if not self.db_path:
            return
        repo = self._get_repository()
        for result in results:
            repo.save_scan(result)

    def _display_results(self, results: List[ScanResult]):
        """Per-file outcome table."""
        table = Table(show_header=True, header_style="bold")
        table.add_column("Fisier", style="cyan", no_wrap=True)
        table.add_column("Status", justify="center")
        table.add_column("Arhitectura")
        table.add_column("Machine", justify="right")

        for row, result in zip(csv_reporter.rows(results), results):
            style = STATUS_STYLES.get(result.status, "white")
            table.add_row(
                Path(result.file_path).name,
                f"[{style}]{result.status}[/{style}]",
                row["architecture"] or row["reason"] or row["errors"] or "-",
                row["machine_type"] or "-",
            )

        console.print(table)
        if results:
            recognized = sum(1 for r in results if r.status == "recognized")
            failed = sum(1 for r in results if r.io_error)
            console.print(f"\n[bold]PE recunoscute:[/bold] {recognized}/{len(results)}")
            if failed:
                console.print(f"[bold red]Erori de citire:[/bold red] {failed}")

    def _save_report(self, results: List[ScanResult], output_path: str):
        """Save results as CSV or JSON depending on the extension."""
        try:
            if Path(output_path).suffix.lower() == ".csv":
                csv_reporter.generate(results, output_path)
            else:
                json_reporter.generate(results, output_path)
            console.print(f"\n[green]OK[/green] Raport salvat: {output_path}")
        except OSError as exc:
            console.print(f"[red]Eroare salvare raport:[/red] {exc}")


def _describe(result: ScanResult) -> str:
    row = csv_reporter.row(result)
    return row["architecture"] or row["reason"] or row["errors"] or result.status


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pe-arch",
        description="PE Architecture Scanner - detectie arhitectura tinta pentru executabile Windows",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemple de utilizare:
  %(prog)s detect app.exe driver.sys
  %(prog)s detect *.dll --output report.csv
  %(prog)s detect --continue-on-invalid setup.exe
  %(prog)s scan-dir C:\\Tools --ext .exe --ext .dll --workers 8
  %(prog)s --db history.db scan-dir build/
  %(prog)s --db history.db history --status invalid
  %(prog)s --db history.db stats
  %(prog)s machine-types
        """,
    )
    parser.add_argument("--config", help="Fisier config YAML (implicit config/config.yaml)")
    parser.add_argument("--db", help="Baza de date SQLite pentru istoricul scanarilor")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Nivel logging",
    )
    scan_options = argparse.ArgumentParser(add_help=False)
    scan_options.add_argument(
        "--continue-on-invalid",
        action="store_true",
        help="Continua cautarea semnaturii MZ daca prima aparitie este invalida",
    )

    subparsers = parser.add_subparsers(dest="command", help="Comenzi disponibile")

    detect_parser = subparsers.add_parser("detect", parents=[scan_options], help="Detecteaza arhitectura unor fisiere")
    detect_parser.add_argument("files", nargs="+", help="Fisiere de analizat")
    detect_parser.add_argument("-o", "--output", help="Raport JSON sau CSV (dupa extensie)")
    detect_parser.add_argument("-w", "--workers", type=int, help="Numar de thread-uri")

    scan_dir_parser = subparsers.add_parser("scan-dir", parents=[scan_options], help="Scaneaza un director")
    scan_dir_parser.add_argument("directory", help="Director de scanat")
    scan_dir_parser.add_argument("--no-recursive", dest="recursive", action="store_false", default=None, help="Nu scana subfolderele")
    scan_dir_parser.add_argument("--ext", dest="extensions", action="append", help="Extensie de inclus (poate fi repetat)")
    scan_dir_parser.add_argument("-o", "--output", help="Raport JSON sau CSV (dupa extensie)")
    scan_dir_parser.add_argument("-w", "--workers", type=int, help="Numar de thread-uri")

    watch_parser = subparsers.add_parser("watch", parents=[scan_options], help="Monitorizare real-time (on-create/on-modify)")
    watch_parser.add_argument("paths", nargs="+", help="Cai de monitorizat")
    watch_parser.add_argument("--no-recursive", dest="recursive", action="store_false", help="Nu urmari recursiv")

    history_parser = subparsers.add_parser("history", help="Istoricul scanarilor salvate")
    history_parser.add_argument("--limit", type=int, default=50, help="Numar maxim de inregistrari")
    history_parser.add_argument(
        "--status", choices=["recognized", "not_recognized", "invalid", "error"], help="Filtru status"
    )

    subparsers.add_parser("machine-types", help="Afiseaza tabelul de tipuri Machine")
    subparsers.add_parser("list-modules", help="Listeaza module disponibile")
    subparsers.add_parser(
        "stats", help="Afiseaza statistici (din istoricul --db, altfel doar procesul curent)"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_OK

    logging.getLogger().setLevel(args.log_level)

    config = load_config(args.config)
    if getattr(args, "continue_on_invalid", False):
        config["scan"]["continue_on_invalid"] = True

    cli = PEArchCLI(config, db_path=args.db)

    try:
        if args.command == "detect":
            return cli.detect(args.files, args.output, args.workers)
        elif args.command == "scan-dir":
            return cli.scan_directory(
                args.directory,
                recursive=args.recursive,
                extensions=args.extensions,
                output=args.output,
                workers=args.workers,
            )
        elif args.command == "watch":
            cli.watch_paths(paths=args.paths, recursive=args.recursive)
        elif args.command == "history":
            return cli.show_history(limit=args.limit, status=args.status)
        elif args.command == "machine-types":
            cli.list_machine_types()
        elif args.command == "list-modules":
            cli.list_modules()
        elif args.command == "stats":
            cli.show_statistics()
        return EXIT_OK
    except KeyboardInterrupt:
        console.print("\n[yellow]Intrerupt de utilizator[/yellow]")
        return EXIT_INTERRUPTED
    except Exception as exc:  # noqa: BLE001
        console.print(f"[bold red]Eroare:[/bold red] {exc}")
        return EXIT_FAILURE
    finally:
        cli.close()


if __name__ == "__main__":
    sys.exit(main())
