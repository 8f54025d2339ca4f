"""Filesystem example for fsexplorer"""

import tempfile
from datetime import datetime

from fsexplorer import Explorer, InvalidPermissionFormat, PathNotFound


def main():
    with tempfile.TemporaryDirectory() as tmpdir:
        explorer = Explorer(tmpdir)

        # Create a small tree
        print("Creating files...")
        explorer.mkdir("documents")
        explorer.write_file("documents/readme.txt", "Hello, world!")
        explorer.create_file("documents/notes.txt")
        explorer.mkdir("documents/old")
        explorer.create_file("documents/old/notes.txt")

        # Get file stats
        print("\nFile stats:")
        stats = explorer.stat("documents/readme.txt")
        print(f"  Inode: {stats.ino}")
        print(f"  Size: {stats.size} bytes")
        print(f"  Mode: {oct(stats.mode)}")
        print(f"  Permissions: {stats.permissions}")
        print(f"  Is file: {stats.is_file()}")
        print(f"  Modified: {datetime.fromtimestamp(stats.mtime).isoformat()}")

        # List directory
        explorer.change_directory("documents")
        print(f"\nListing {explorer.cwd}:")
        for entry in explorer.list_files():
            print(f"  {'[DIR] ' if entry.is_directory else '[FILE]'} {entry.name}")

        # Search recursively
        print("\nSearching for notes.txt:")
        for path in explorer.search("notes.txt"):
            print(f"  Found: {path}")

        # Copy and change permissions
        explorer.copy_file("readme.txt", "readme.bak")
        print(f"\nreadme.bak: {explorer.get_permissions('readme.bak')}")
        explorer.set_permissions("readme.bak", "600")
        print(f"readme.bak after chmod 600: {explorer.get_permissions('readme.bak')}")

        try:
            explorer.set_permissions("readme.bak", "rw-")
        except InvalidPermissionFormat as e:
            print(f"Rejected: {e}")

        try:
            explorer.delete_file("missing.txt")
        except PathNotFound as e:
            print(f"Rejected: {e}")


if __name__ == "__main__":
    main()
