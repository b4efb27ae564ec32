from .database import (
    StoreNotInitializedError,
    configure,
    get_conn,
    get_db,
    get_index_status,
    init_db,
    is_ready,
)
from .sentences import (
    add_sentence,
    count_sentences,
    delete_all_sentences,
    delete_sentence,
    get_difficulty_counts,
    get_sentence,
    update_sentence,
)
from .sampling import get_random_sentence, get_sentences
from .search import search_sentences
from .diagnostics import check_index_sync, rebuild_search_index
from .bulk import (
    bulk_import_sentences,
    export_sentences,
    get_paginated_sentences,
    reseed_from_json,
    seed_initial_data,
)
from .transactions import transaction
