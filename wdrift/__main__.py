from wdrift.cli import main

main()
