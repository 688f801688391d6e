from hulud_scanner.cli import main

main()
