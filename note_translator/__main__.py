from note_translator.cli import main

raise SystemExit(main())
