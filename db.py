import duckdb
import logging

import config

DB_FILE = config.DB_FILE

# -----------------------------
# Logging
# -----------------------------
logging.basicConfig(
    filename=config.LOG_FILE,
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(message)s"
)

def log_info(msg):
    logging.info(msg)

def log_error(msg):
    logging.error(msg)

# -----------------------------
# Get a DB connection
# -----------------------------
def get_db():
    """
    Returns a new DuckDB connection.
    """
    return duckdb.connect(DB_FILE)

# -----------------------------
# Initialize database schema
# -----------------------------
def init_db():
    conn = get_db()
    try:
        # Categories table
        conn.execute("""
        CREATE TABLE IF NOT EXISTS categories (
            id VARCHAR PRIMARY KEY,
            user_id VARCHAR,
            name VARCHAR NOT NULL,
            type VARCHAR DEFAULT 'expense',
            color VARCHAR DEFAULT '#888888',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("Categories table ensured.")

        # Transactions table (recurring definitions live here too)
        conn.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            id VARCHAR PRIMARY KEY,
            user_id VARCHAR NOT NULL,
            date DATE NOT NULL,
            description TEXT,
            amount DOUBLE NOT NULL,
            type VARCHAR CHECK(type IN ('income','expense','transfer')),
            category_id VARCHAR,
            is_recurring BOOLEAN DEFAULT FALSE,
            recurrence_frequency VARCHAR,
            is_active BOOLEAN DEFAULT TRUE,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("Transactions table ensured.")

        # Company settings table
        conn.execute("""
        CREATE TABLE IF NOT EXISTS company_settings (
            user_id VARCHAR PRIMARY KEY,
            company_name VARCHAR,
            default_currency VARCHAR DEFAULT 'USD',
            fiscal_year_start VARCHAR DEFAULT '01',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """)
        log_info("Company settings table ensured.")

        # Indexes
        conn.execute("CREATE INDEX IF NOT EXISTS idx_tx_user_date ON transactions(user_id, date);")
        log_info("Indexes created/ensured.")

    except Exception as e:
        log_error(f"Error initializing DB: {e}")
        raise
    finally:
        conn.close()
        log_info("Database setup complete and connection closed.")
