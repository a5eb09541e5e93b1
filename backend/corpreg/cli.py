"""
CLI commands for corpreg
Run with: python -m corpreg.cli <command>
"""

import sys
from pathlib import Path

import uvicorn

from corpreg.database import SessionLocal, init_db
from corpreg.services import export_service
from corpreg.services.record_store import RecordStore, StorageError


def list_companies():
    """Print every company with its fiscal years"""
    db = SessionLocal()

    try:
        store = RecordStore(db)
        snapshot = store.export_snapshot()
        if not snapshot:
            print("No companies registered")
            return True

        for company, fiscal_years in snapshot:
            print(f"{company.name} ({company.registration_number})  id={company.id}")
            for fy in fiscal_years:
                main_flag = " *" if fy.is_main_fiscal_year else ""
                print(f"    {fy.fiscal_year}  {fy.period}{main_flag}")
        return True
    finally:
        db.close()


def export_csv(target: Path):
    """
    Write the CSV export to a file

    Args:
        target: File or directory. A directory gets the default file name.
    """
    db = SessionLocal()

    try:
        store = RecordStore(db)
        snapshot = store.export_snapshot()
        if not snapshot:
            print("Nothing to export")
            return False

        if target.is_dir():
            target = target / export_service.export_filename()

        target.write_bytes(export_service.export_bytes(snapshot))
        print(f"Exported {len(snapshot)} companies to {target}")
        return True
    finally:
        db.close()


def clear_all():
    """Delete every company and fiscal year after confirmation"""
    response = input("All companies and fiscal years will be deleted. Continue? (y/n): ")
    if response.lower() != "y":
        print("Aborted")
        return False

    db = SessionLocal()

    try:
        RecordStore(db).clear_all()
        print("All data deleted")
        return True
    except StorageError as e:
        print(f"Error: {e}")
        return False
    finally:
        db.close()


def serve(host: str = "127.0.0.1", port: int = 8000):
    """Run the API with uvicorn"""
    uvicorn.run("corpreg.main:app", host=host, port=port)
    return True


def main():
    """Main CLI entry point"""
    if len(sys.argv) < 2:
        print("corpreg CLI")
        print("\nUsage: python -m corpreg.cli <command> [args]")
        print("\nCommands:")
        print("  list             - List companies and their fiscal years")
        print("  export [path]    - Write the CSV export (default: current directory)")
        print("  clear            - Delete all companies and fiscal years")
        print("  serve [port]     - Run the API on localhost (default port: 8000)")
        print("\nExamples:")
        print("  python -m corpreg.cli list")
        print("  python -m corpreg.cli export ./exports")
        print("  python -m corpreg.cli serve 8080")
        sys.exit(1)

    init_db()
    command = sys.argv[1]

    if command == "list":
        success = list_companies()
        sys.exit(0 if success else 1)

    elif command == "export":
        target = Path(sys.argv[2]) if len(sys.argv) > 2 else Path.cwd()
        success = export_csv(target)
        sys.exit(0 if success else 1)

    elif command == "clear":
        success = clear_all()
        sys.exit(0 if success else 1)

    elif command == "serve":
        port = int(sys.argv[2]) if len(sys.argv) > 2 else 8000
        serve(port=port)

    else:
        print(f"Unknown command: {command}")
        print("Run 'python -m corpreg.cli' to see available commands")
        sys.exit(1)


if __name__ == "__main__":
    main()
