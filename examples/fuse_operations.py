# Copyright 2025 Accelerated Cloud Storage Corporation. All Rights Reserved
'''
This example demonstrates how to use the SwiftFS FUSE filesystem to read and write files to a Swift container.

Setup:
    # Install the package with its dependencies
    pip install -e .

    # Install FUSE on your system
    # On Ubuntu/Debian:
    sudo apt-get install fuse

    # Configure Swift credentials
    # Create ~/.swiftfs/credentials.yaml with:
    # default:
    #   auth_url: https://swift.example.com/auth/v1.0
    #   user: account:user
    #   key: secret

    # Mount the container (or add --memory to try without a cluster)
    python -m swiftfs.fuse swift://data/ /mnt/swift-data

Usage:
    python fuse_operations.py /mnt/swift-data

    # Unmount when done
    fusermount -u /mnt/swift-data

Troubleshooting:
    # Enable debug logging and per-operation tracing
    export SWIFTFS_LOG_LEVEL=DEBUG
    python -m swiftfs.fuse swift://data/ /mnt/swift-data --trace
'''
import sys
import os

def main():
    if len(sys.argv) != 2:
        print("Usage: python fuse_operations.py <mountpoint>")
        sys.exit(1)

    mountpoint = sys.argv[1]
    directory = os.path.join(mountpoint, "example")
    example_file = os.path.join(directory, "example.txt")

    os.makedirs(directory, exist_ok=True)
    print(f"Directory created: {directory}")

    with open(example_file, 'w') as f:
        f.write("Hello FUSE")
    print(f"File created and written: {example_file}")

    with open(example_file, 'r') as f:
        print(f"Content read from file: {f.read()}")

    renamed = os.path.join(directory, "renamed.txt")
    os.rename(example_file, renamed)
    print(f"Directory listing after rename: {os.listdir(directory)}")

    os.remove(renamed)
    os.rmdir(directory)
    print(f"Removed {directory}")

if __name__ == '__main__':
    main()
