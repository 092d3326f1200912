"""
Reset the local vocabulary database.

DANGEROUS: This deletes all lists, progress and daily stats!
Only use when you want to start fresh.

Usage:
    python -m scripts.maintenance.reset_local_db
"""

from vocabox.leitner import Database


def main():
    db = Database()

    print("=" * 60)
    print("WARNING: Reset Local Database")
    print("=" * 60)
    print()
    print(f"Database: {db.url}")
    print("This will DELETE:")
    print("  - All vocabulary lists (built-in and imported)")
    print("  - All items and their boxes")
    print("  - All daily stats and settings")
    print()

    response = input("Are you sure you want to reset? (type 'yes' to confirm): ")

    if response.lower() == "yes":
        print("\nResetting database...")
        db.reset_db()
        print("✓ Database reset complete!")
        print("\nRun `python -m scripts.seed_builtin_lists` to restore the built-in lists.")
    else:
        print("\nCancelled. No changes made.")

    db.dispose()


if __name__ == "__main__":
    main()
