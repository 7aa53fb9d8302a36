from hostrelay.cli import main

main()
