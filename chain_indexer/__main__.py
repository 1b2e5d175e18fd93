from chain_indexer.cli import main

main()
