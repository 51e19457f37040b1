#!/usr/bin/env python3
'''
 $ DEBUG=1 ./scripts/memgram.py -g grammar.toml -b file.bin -s 16
'''
from memgram.cli import main


if __name__ == '__main__':
    main()
