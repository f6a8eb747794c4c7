from ledger import config
from ledger.cli import FinanceLedgerCLI
from ledger.errors import PersistenceUnavailable
from ledger.logging_setup import configure_logging
from ledger.logic import TransactionStore
from ledger.storage import load_data


def main() -> None:
    configure_logging()

    store = TransactionStore(capacity=config.MAX_TRANSACTIONS)

    # A missing data file on first run just means an empty ledger.
    try:
        load_data(store, config.DATA_FILE)
    except PersistenceUnavailable:
        pass

    shell = FinanceLedgerCLI(store=store, data_file=config.DATA_FILE)
    shell.intro = (f"Welcome! {len(store)} existing record(s) loaded (if any) "
                   f"from {config.DATA_FILE}. Type 'help' for commands.")
    shell.cmdloop()


if __name__ == "__main__":
    main()
