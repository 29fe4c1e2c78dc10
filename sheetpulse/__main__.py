from sheetpulse.cli import main

main()
