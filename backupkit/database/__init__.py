"""Database dumps for MySQL, MariaDB, PostgreSQL, Redis, SQLite, etcd and SQL Server."""