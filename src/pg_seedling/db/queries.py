"""SQL queries used by single-table PostgreSQL introspection."""

RELATIONS_QUERY = """
SELECT
  t.table_name,
  t.table_type
FROM information_schema.tables AS t
WHERE t.table_schema = %(schema)s
  AND t.table_type IN ('BASE TABLE', 'VIEW')
ORDER BY t.table_name;
"""

COLUMNS_QUERY = """
SELECT
  c.column_name,
  c.data_type,
  c.is_nullable,
  c.column_default IS NOT NULL
    OR c.is_identity = 'YES'
    OR c.is_generated = 'ALWAYS' AS has_default,
  c.character_maximum_length,
  c.ordinal_position
FROM information_schema.columns AS c
WHERE c.table_schema = %(schema)s
  AND c.table_name = %(table)s
ORDER BY c.ordinal_position;
"""

PRIMARY_KEY_QUERY = """
SELECT
  kcu.column_name,
  kcu.ordinal_position
FROM information_schema.table_constraints AS tc
JOIN information_schema.key_column_usage AS kcu
  ON kcu.constraint_name = tc.constraint_name
  AND kcu.constraint_schema = tc.constraint_schema
  AND kcu.table_schema = tc.table_schema
  AND kcu.table_name = tc.table_name
WHERE tc.constraint_type = 'PRIMARY KEY'
  AND tc.table_schema = %(schema)s
  AND tc.table_name = %(table)s
ORDER BY kcu.ordinal_position;
"""

UNIQUE_CONSTRAINTS_QUERY = """
SELECT
  tc.constraint_name,
  kcu.column_name,
  kcu.ordinal_position
FROM information_schema.table_constraints AS tc
JOIN information_schema.key_column_usage AS kcu
  ON kcu.constraint_name = tc.constraint_name
  AND kcu.constraint_schema = tc.constraint_schema
  AND kcu.table_schema = tc.table_schema
  AND kcu.table_name = tc.table_name
WHERE tc.constraint_type = 'UNIQUE'
  AND tc.table_schema = %(schema)s
  AND tc.table_name = %(table)s
ORDER BY tc.constraint_name, kcu.ordinal_position;
"""

CHECK_CONSTRAINTS_QUERY = """
SELECT
  con.conname AS constraint_name,
  ARRAY(
    SELECT att.attname
    FROM unnest(con.conkey) WITH ORDINALITY AS k(attnum, ord)
    JOIN pg_catalog.pg_attribute AS att
      ON att.attrelid = con.conrelid
      AND att.attnum = k.attnum
    ORDER BY k.ord
  ) AS columns,
  pg_catalog.pg_get_constraintdef(con.oid) AS definition
FROM pg_catalog.pg_constraint AS con
JOIN pg_catalog.pg_class AS cls
  ON cls.oid = con.conrelid
JOIN pg_catalog.pg_namespace AS n
  ON n.oid = cls.relnamespace
WHERE con.contype = 'c'
  AND n.nspname = %(schema)s
  AND cls.relname = %(table)s
ORDER BY con.conname;
"""

OUTGOING_FOREIGN_KEYS_QUERY = """
SELECT
  src_kcu.constraint_name AS constraint_name,
  src_kcu.ordinal_position AS position,
  src_kcu.column_name AS column_name,
  ref_kcu.table_schema AS ref_table_schema,
  ref_kcu.table_name AS ref_table_name,
  ref_kcu.column_name AS ref_column_name
FROM information_schema.referential_constraints AS rc
JOIN information_schema.key_column_usage AS src_kcu
  ON src_kcu.constraint_name = rc.constraint_name
  AND src_kcu.constraint_schema = rc.constraint_schema
JOIN information_schema.key_column_usage AS ref_kcu
  ON ref_kcu.constraint_name = rc.unique_constraint_name
  AND ref_kcu.constraint_schema = rc.unique_constraint_schema
  AND ref_kcu.ordinal_position = src_kcu.position_in_unique_constraint
WHERE src_kcu.table_schema = %(schema)s
  AND src_kcu.table_name = %(table)s
ORDER BY src_kcu.constraint_name, src_kcu.ordinal_position;
"""

INCOMING_FOREIGN_KEYS_QUERY = """
SELECT
  src_kcu.constraint_name AS constraint_name,
  src_kcu.table_schema AS table_schema,
  src_kcu.table_name AS table_name,
  src_kcu.column_name AS column_name,
  ref_kcu.column_name AS ref_column_name,
  EXISTS (
    SELECT 1
    FROM information_schema.table_constraints AS utc
    JOIN information_schema.key_column_usage AS ukcu
      ON ukcu.constraint_name = utc.constraint_name
      AND ukcu.constraint_schema = utc.constraint_schema
      AND ukcu.table_schema = utc.table_schema
      AND ukcu.table_name = utc.table_name
    WHERE utc.constraint_type IN ('UNIQUE', 'PRIMARY KEY')
      AND utc.table_schema = src_kcu.table_schema
      AND utc.table_name = src_kcu.table_name
    GROUP BY utc.constraint_name
    HAVING count(*) = 1
      AND bool_and(ukcu.column_name = src_kcu.column_name)
  ) AS is_unique
FROM information_schema.referential_constraints AS rc
JOIN information_schema.key_column_usage AS src_kcu
  ON src_kcu.constraint_name = rc.constraint_name
  AND src_kcu.constraint_schema = rc.constraint_schema
JOIN information_schema.key_column_usage AS ref_kcu
  ON ref_kcu.constraint_name = rc.unique_constraint_name
  AND ref_kcu.constraint_schema = rc.unique_constraint_schema
  AND ref_kcu.ordinal_position = src_kcu.position_in_unique_constraint
WHERE ref_kcu.table_schema = %(schema)s
  AND ref_kcu.table_name = %(table)s
  AND src_kcu.position_in_unique_constraint IS NOT NULL
ORDER BY src_kcu.table_schema, src_kcu.table_name, src_kcu.constraint_name;
"""
