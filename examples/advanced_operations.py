# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved.
"""
Large files, directory renames and replica locations.

Uses a 1MB partition size so a few megabytes are enough to produce a
manifest upload.
"""
from swiftfs import InMemorySwiftClient, SwiftNativeFileSystem
from swiftfs.client.exceptions import FileAlreadyExistsError

PARTITION_SIZE = 1024 * 1024

def main():
    client = InMemorySwiftClient(containers=["data"])
    fs = SwiftNativeFileSystem("swift://data/", client, partition_size=PARTITION_SIZE)

    try:
        # Write a file larger than one partition
        test_data = b"Sample data for large file upload." * 100000
        with fs.create("/datasets/large_file.dat") as stream:
            stream.write(test_data)
        print(f"Uploaded {stream.bytes_written} bytes in {stream.parts_uploaded} parts")

        status = fs.get_file_status("/datasets/large_file.dat")
        assert status.length == len(test_data)
        assert fs.open("/datasets/large_file.dat").read() == test_data
        print("Read back the manifest upload as one file")

        # Rename the whole directory
        fs.rename("/datasets", "/archive")
        for entry in fs.list_status("/archive"):
            print(f"- {entry.path}")

        # Renaming onto an existing file is refused
        with fs.create("/archive/other.dat") as stream:
            stream.write(b"other")
        try:
            fs.rename("/archive/other.dat", "/archive/large_file.dat")
        except FileAlreadyExistsError as e:
            print(f"Rename refused: {e}")

        # Replica locations
        for uri in fs.get_file_block_locations("/archive/other.dat"):
            print(f"Replica: {uri}")

    finally:
        fs.delete("/", recursive=True)
        fs.close()

if __name__ == "__main__":
    main()
