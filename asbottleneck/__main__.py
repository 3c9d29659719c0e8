from asbottleneck.cli import main

main()
