from blobstage.cli import main

main()
