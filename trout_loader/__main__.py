from trout_loader.cli import main

main()
