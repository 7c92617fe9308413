from imgtensor.cli import main

raise SystemExit(main())
