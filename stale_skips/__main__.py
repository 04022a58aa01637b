from stale_skips.cli import main

main()
