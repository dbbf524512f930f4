"""Entry point for 'python -m mbc_cms'."""

from mbc_cms.cli import main

if __name__ == "__main__":
    main()
