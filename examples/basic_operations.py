# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Basic filesystem operations on a Swift container.

Runs against an in-memory container by default. Pass --swift to use the
account configured in ~/.swiftfs/credentials.yaml instead.
"""
import sys
import uuid

from swiftfs import InMemorySwiftClient, SwiftNativeFileSystem, SwiftRestClient, load_config

def main():
    if "--swift" in sys.argv:
        config = load_config()
        client = SwiftRestClient(config)
        uri = config.container_uri or "swift://data/"
    else:
        client = InMemorySwiftClient(containers=["data"])
        uri = "swift://data/"

    fs = SwiftNativeFileSystem(uri, client)
    base = f"/swiftfs-example-{uuid.uuid4()}"

    try:
        # Create a directory
        fs.mkdirs(base)
        print(f"Created directory: {base}")

        # Write a file
        with fs.create(f"{base}/hello.txt") as stream:
            stream.write(b"Hello, World!")
        print("Wrote file: hello.txt")

        # Get file status
        status = fs.get_file_status(f"{base}/hello.txt")
        print(f"File size: {status.length} bytes")
        print(f"Last modified (ms): {status.modification_time}")

        # Read the file back, then a slice of it
        print(f"Downloaded content: {fs.open(f'{base}/hello.txt').read().decode()}")
        print(f"Bytes 7-11: {fs.open(f'{base}/hello.txt', 7, 5).read().decode()}")

        # List the directory
        print("Entries:")
        for entry in fs.list_status(base):
            kind = "dir " if entry.is_dir else "file"
            print(f"- {kind} {entry.path} ({entry.length} bytes)")

        # Rename the file
        fs.rename(f"{base}/hello.txt", f"{base}/renamed.txt")
        print("Renamed hello.txt to renamed.txt")

    finally:
        # Delete everything that was created
        fs.delete(base, recursive=True)
        print(f"Deleted directory: {base}")
        fs.close()

if __name__ == "__main__":
    main()
