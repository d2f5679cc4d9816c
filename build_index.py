"""
Build the approximate (fuzzy) surface-form index from a TSV file.

Each line maps an entity to its aliases: ENTITY[TAB]FORM1[TAB]FORM2...
"""
import argparse
from pathlib import Path

from dotenv import load_dotenv

from ngram_qa.config import Config
from ngram_qa.dictionaries import FuzzyIndexDictionary, TsvImportSource
from ngram_qa.utils.logging_utils import setup_logging


def main():
    load_dotenv()
    setup_logging()

    parser = argparse.ArgumentParser(description='Build fuzzy surface-form index')
    parser.add_argument('--surface-forms', default=Config.SURFACE_FORMS_PATH,
                        help=f'TSV file (default: {Config.SURFACE_FORMS_PATH})')
    parser.add_argument('--index', default=Config.INDEX_PATH,
                        help=f'Index file (default: {Config.INDEX_PATH})')
    parser.add_argument('--rebuild', action='store_true',
                        help='Clear an existing index before importing')
    args = parser.parse_args()

    Path(args.index).parent.mkdir(parents=True, exist_ok=True)
    source = TsvImportSource(args.surface_forms)

    with FuzzyIndexDictionary(index_path=args.index) as dictionary:
        if args.rebuild:
            print(f"Clearing index {args.index}...")
            dictionary.clear_index()

        print(f"Indexing {args.surface_forms}...")
        count = dictionary.put_all(source)

        print(f"\nIndex Statistics:")
        print(f"  Pairs read:     {count:,}")
        print(f"  Total entries:  {len(dictionary):,}")

    print(f"Saved index to {args.index}")


if __name__ == '__main__':
    main()
